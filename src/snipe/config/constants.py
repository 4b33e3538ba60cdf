"""Configuration constants.

Values here are not user-configurable. For configurable values, see
models.py.
"""

APP_NAME = "snipe"
"""XDG prefix for config and data directories."""

CONFIG_FILE_NAME = "config.yaml"
"""User config file inside the config directory."""

ENV_PREFIX = "SNIPE__"
"""Prefix for environment variable overrides."""

DOTENV_FILE = ".env"
"""Per-checkout file consulted for BUILD_TYPE."""
