"""Config module exports."""

from snipe.config.loader import get_index_dir, load_build_type, load_config
from snipe.config.models import (
    CommandsConfig,
    EnvConfig,
    ExecutionConfig,
    IndexConfig,
    LoggingConfig,
    ScanConfig,
    SnipeConfig,
)
from snipe.config.user_config import ensure_user_config

__all__ = [
    "load_config",
    "load_build_type",
    "get_index_dir",
    "ensure_user_config",
    "SnipeConfig",
    "ScanConfig",
    "CommandsConfig",
    "EnvConfig",
    "ExecutionConfig",
    "IndexConfig",
    "LoggingConfig",
]
