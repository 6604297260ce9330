"""Configuration loading.

Settings live in ``~/.config/candlescope/config.toml``; the
``CANDLESCOPE_CONFIG`` environment variable points at another file.
Every key is optional.

Example::

    [data]
    format = "csv"

    [volume_profile]
    levels = 12

    [prediction]
    seed = 42
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "candlescope" / "config.toml"
CONFIG_ENV_VAR = "CANDLESCOPE_CONFIG"

DEFAULTS: dict[str, dict[str, Any]] = {
    "data": {"format": None},
    "volume_profile": {"levels": 10},
    "prediction": {"seed": None},
}


def get_config_path() -> Path:
    """Return the configuration file path, honouring ``CANDLESCOPE_CONFIG``."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> dict[str, dict[str, Any]]:
    """Load configuration merged over the defaults.

    A missing or unparseable file yields the defaults.

    Args:
        path: Config file (defaults to ``get_config_path()``)

    Returns:
        Mapping of section name to settings.
    """
    import toml

    config_path = path or get_config_path()
    config = {section: dict(values) for section, values in DEFAULTS.items()}

    if not config_path.exists():
        return config

    try:
        loaded = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return config

    for section, values in loaded.items():
        if isinstance(values, dict):
            config.setdefault(section, {}).update(values)

    return config
