"""User config file management.

The user config lives at $XDG_CONFIG_HOME/snipe/config.yaml. On first run
the defaults are written there so they can be edited; ``--config-file``
seeds it from another file instead.
"""

import shutil
from pathlib import Path

import yaml

from snipe.config.loader import _load_yaml, get_config_path
from snipe.config.models import SnipeConfig
from snipe.core.errors import ConfigError
from snipe.core.progress import status

CONFIG_HEADER = """\
# Snipe Configuration
# Templates under commands.command_mappings use jinja2 syntax.
# Any key can be overridden with SNIPE__<SECTION>__<KEY> environment variables.

"""


def write_default_config(path: Path, config: SnipeConfig | None = None) -> None:
    """Write a full config file with a short header."""
    cfg = config or SnipeConfig()
    data = cfg.model_dump(exclude={"logging"})
    path.parent.mkdir(parents=True, exist_ok=True)
    content = CONFIG_HEADER + yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    path.write_text(content)


def ensure_user_config(seed: Path | None = None, target: Path | None = None) -> Path:
    """Make sure a user config exists and return its path.

    Args:
        seed: Optional file copied over the user config before loading.
        target: Config location. Defaults to the XDG config path.

    Raises:
        ConfigError: If ``seed`` does not exist or is not valid YAML.
    """
    path = target or get_config_path()

    if seed is not None:
        if not seed.is_file():
            raise ConfigError.file_not_found(str(seed))
        # Reject unparsable seeds before they replace a working config
        _load_yaml(seed)
        path.parent.mkdir(parents=True, exist_ok=True)
        if seed.resolve() != path.resolve():
            shutil.copyfile(seed, path)
        status(f"seeded configuration from {seed} into {path}")
        return path

    if not path.exists():
        write_default_config(path)
        status(f"storing default configuration in {path}")

    return path
