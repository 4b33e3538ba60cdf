"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SNIPE__SECTION__KEY)
3. User YAML ($XDG_CONFIG_HOME/snipe/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    SNIPE__<SECTION>__<KEY>=<VALUE>

Examples:
    SNIPE__LOGGING__LEVEL=DEBUG
    SNIPE__SCAN__CC_TEST_ROOT=src/v
    SNIPE__INDEX__INDEX_DIR=/tmp/snipe-index
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SNIPE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Use -v on the command line for DEBUG.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScanConfig(BaseModel):
    """Where and how tests are discovered.

    Env vars:
        SNIPE__SCAN__CC_TEST_ROOT: Root scanned for compiled unit tests
        SNIPE__SCAN__PY_TEST_ROOT: Root scanned for scripted tests
    """

    cc_test_root: str = Field(
        default="src/v",
        description="Root directory scanned for build manifests. Relative to the working directory.",
    )
    py_test_root: str = Field(
        default="tests/rptest",
        description="Root directory scanned for scripted test modules.",
    )
    manifest_name: str = Field(
        default="CMakeLists.txt",
        description="File name of the build manifests declaring test targets.",
    )
    manifest_dir_name: str = Field(
        default="tests",
        description="Only manifests inside a directory with this name are parsed.",
    )
    cc_test_macros: list[str] = Field(
        default_factory=lambda: [
            "FIXTURE_TEST",
            "SEASTAR_THREAD_TEST_CASE",
            "BOOST_AUTO_TEST_CASE",
        ],
        description="Macros whose first argument names a compiled test case.",
    )
    py_test_decorators: list[str] = Field(
        default_factory=lambda: ["cluster"],
        description="Decorator calls that mark a method as a scripted test.",
    )

    @field_validator("cc_test_macros", "py_test_decorators")
    @classmethod
    def validate_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one entry is required")
        return v


def _default_command_mappings() -> dict[str, str]:
    return {
        "duck": 'task rp:run-ducktape-tests DUCKTAPE_ARGS="{{test_path}} {{test_args}}"',
        "compile": "ninja -C vbuild/{{build_type}}/clang -j 25 bin/{{test_obj}}",
        "run": (
            "./tools/cmake_test.py --binary {{pwd}}/vbuild/{{build_type}}/clang/bin/{{test_obj}}"
            " {{test_tag_arg}} -- -c1"
        ),
    }


class CommandsConfig(BaseModel):
    """Command templates rendered for a resolved test.

    Templates use jinja2 syntax. Compiled tests render ``compile`` then
    ``run``; scripted tests render ``duck``.
    """

    command_mappings: dict[str, str] = Field(default_factory=_default_command_mappings)


def _default_envs() -> dict[str, str]:
    return {
        "RP_TRIM_LOGS": "false",
        "ENABLE_GIT_VERSION": "OFF",
        "ENABLE_GIT_HASH": "OFF",
        "REDPANDA_LOG_LEVEL": "trace",
    }


class EnvConfig(BaseModel):
    """Environment variables injected into every executed command."""

    envs: dict[str, str] = Field(default_factory=_default_envs)


class ExecutionConfig(BaseModel):
    """How rendered commands are run.

    Env vars:
        SNIPE__EXECUTION__WRAPPER: Terminal-preserving wrapper command
        SNIPE__EXECUTION__DEFAULT_BUILD_TYPE: Build variant when .env has none
    """

    wrapper: str = Field(
        default="teetty -s --",
        description="Prefix that keeps the child attached to a pty. Empty runs commands directly.",
    )
    py_test_args: str = Field(
        default="--repeat=1",
        description="Extra arguments passed to scripted tests.",
    )
    default_build_type: str = Field(
        default="DEBUG",
        description="Build variant used when BUILD_TYPE is not set in .env.",
    )


class IndexConfig(BaseModel):
    """Index storage configuration.

    Env vars:
        SNIPE__INDEX__INDEX_DIR: Override index storage location
    """

    index_dir: str | None = Field(
        default=None,
        description="Directory holding cc.json and py.json. Default: $XDG_DATA_HOME/snipe.",
    )


class SnipeConfig(BaseModel):
    """Root configuration (for type hints)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    env: EnvConfig = Field(default_factory=EnvConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
