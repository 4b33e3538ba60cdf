"""Snipe error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index
- 4xxx: Scan
- 5xxx: Execution
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003

    # Index (3xxx)
    INDEX_PERSIST_FAILED = 3001

    # Scan (4xxx)
    SCAN_ROOT_MISSING = 4001
    SCAN_PARSE_FAILED = 4002
    SCAN_ROOT_UNREADABLE = 4003

    # Execution (5xxx)
    EXEC_MISSING_TEMPLATE = 5001
    EXEC_RENDER_FAILED = 5002
    EXEC_INVALID_COMMAND = 5003
    EXEC_COMMAND_FAILED = 5004


@dataclass(frozen=True, slots=True)
class SnipeError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SCAN_ROOT_MISSING')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SnipeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class PersistError(SnipeError):
    """The rebuilt index could not be written to disk."""

    @classmethod
    def write_failed(cls, kind: str, path: str, reason: str) -> "PersistError":
        return cls(
            code=ErrorCode.INDEX_PERSIST_FAILED,
            message=f"Failed to write {kind} index to {path}: {reason}",
            retryable=True,
            details={"kind": kind, "path": path, "reason": reason},
        )


class ScanError(SnipeError):
    """Test discovery failures. Fatal for the invocation."""

    @classmethod
    def root_missing(cls, kind: str, path: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_ROOT_MISSING,
            message=f"Scan root for {kind} tests does not exist: {path}",
            details={"kind": kind, "path": path},
        )

    @classmethod
    def root_unreadable(cls, kind: str, path: str, reason: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_ROOT_UNREADABLE,
            message=f"Cannot read scan root for {kind} tests at {path}: {reason}",
            details={"kind": kind, "path": path, "reason": reason},
        )

    @classmethod
    def parse_failed(cls, kind: str, path: str, reason: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_PARSE_FAILED,
            message=f"Failed to parse {path} while scanning {kind} tests: {reason}",
            details={"kind": kind, "path": path, "reason": reason},
        )


class ExecutionError(SnipeError):
    """Rendering or running a test command failed."""

    @classmethod
    def missing_template(cls, name: str) -> "ExecutionError":
        return cls(
            code=ErrorCode.EXEC_MISSING_TEMPLATE,
            message=f"No command template named '{name}' is configured",
            details={"template": name},
        )

    @classmethod
    def render_failed(cls, name: str, reason: str) -> "ExecutionError":
        return cls(
            code=ErrorCode.EXEC_RENDER_FAILED,
            message=f"Failed to render command template '{name}': {reason}",
            details={"template": name, "reason": reason},
        )

    @classmethod
    def invalid_command(cls, command: str, reason: str) -> "ExecutionError":
        return cls(
            code=ErrorCode.EXEC_INVALID_COMMAND,
            message=f"Cannot run command '{command}': {reason}",
            details={"command": command, "reason": reason},
        )

    @classmethod
    def command_failed(cls, command: str, returncode: int) -> "ExecutionError":
        return cls(
            code=ErrorCode.EXEC_COMMAND_FAILED,
            message=f"Command exited with status {returncode}: {command}",
            details={"command": command, "returncode": returncode},
        )

