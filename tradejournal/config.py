"""Configuration loading.

Settings live in ``~/.config/tradejournal/config.toml``; the
``TRADEJOURNAL_CONFIG`` environment variable points elsewhere.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "tradejournal"
DEFAULT_IDENTITY = "local"


def get_config_path() -> Path:
    override = os.environ.get("TRADEJOURNAL_CONFIG")
    return Path(override) if override else CONFIG_DIR / "config.toml"


def load_config(config_path: Optional[Path] = None) -> Optional[dict]:
    """Load configuration.

    Returns:
        Config dict, or None if the file is missing or unreadable.
    """
    config_path = config_path or get_config_path()
    if not config_path.exists():
        return None
    try:
        return toml.load(config_path)
    except toml.TomlDecodeError as e:
        logger.warning("Could not parse %s: %s", config_path, e)
        return None


def create_template_config(config_path: Optional[Path] = None) -> Path:
    """Write a template configuration file."""
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "journal": {
            "db_path": str(config_path.parent / "journal.db"),
            "identity": DEFAULT_IDENTITY,
        },
        "display": {
            "currency_symbol": "",  # Leave empty to show the profile currency code
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def get_db_path(config: dict) -> Path:
    db_path = config.get("journal", {}).get("db_path")
    return Path(db_path).expanduser() if db_path else CONFIG_DIR / "journal.db"


def get_identity(config: dict) -> str:
    return config.get("journal", {}).get("identity") or DEFAULT_IDENTITY
