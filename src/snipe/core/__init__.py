"""Core module exports."""

from snipe.core.errors import (
    ConfigError,
    ErrorCode,
    ExecutionError,
    PersistError,
    ScanError,
    SnipeError,
)
from snipe.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from snipe.core.progress import status, suppress_console_logs

__all__ = [
    # Errors
    "SnipeError",
    "ConfigError",
    "ErrorCode",
    "ExecutionError",
    "PersistError",
    "ScanError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "status",
    "suppress_console_logs",
]
