"""
Configuration management for Listing Sheet Builder.

Loads config.yaml and provides typed access to settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Config file location: lives inside the listing_sheet package
_PACKAGE_DIR = Path(__file__).parent.resolve()
CONFIG_PATH = _PACKAGE_DIR / "config.yaml"

SCHEMA_ENV_VAR = "LISTING_SHEET_SCHEMA"
SCHEMA_MODES = ("dynamic", "fixed")

# Cache for loaded config
_config_cache: Optional[Dict[str, Any]] = None


def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Load configuration from config.yaml.

    Args:
        reload: Force reload even if cached

    Returns:
        Configuration dictionary (empty when the file is missing)
    """
    global _config_cache

    if _config_cache is not None and not reload:
        return _config_cache

    if not CONFIG_PATH.exists():
        _config_cache = {}
        return _config_cache

    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        _config_cache = yaml.safe_load(f) or {}

    return _config_cache


def get_config_value(*keys: str, default: Any = None) -> Any:
    """
    Get a nested config value safely.

    Example:
        sheet = get_config_value('export', 'sheet_name', default='Parsed Data')
    """
    config = get_config()

    for key in keys:
        if isinstance(config, dict) and key in config:
            config = config[key]
        else:
            return default

    return config


@dataclass(frozen=True)
class Settings:
    schema_mode: str = "dynamic"
    export_file_name: str = "parsed_data_export.xlsx"
    sheet_name: str = "Parsed Data"
    log_level: str = "INFO"
    server_name: str = "127.0.0.1"
    server_port: int = 7860


def load_settings(reload: bool = False) -> Settings:
    """Build `Settings` from config.yaml, with `LISTING_SHEET_SCHEMA` taking precedence."""
    if reload:
        get_config(reload=True)

    defaults = Settings()
    mode = os.environ.get(SCHEMA_ENV_VAR) or get_config_value("schema", default=defaults.schema_mode)
    mode = str(mode).strip().lower()
    if mode not in SCHEMA_MODES:
        raise ValueError(f"Unknown schema mode {mode!r}; expected one of {', '.join(SCHEMA_MODES)}.")

    return Settings(
        schema_mode=mode,
        export_file_name=str(get_config_value("export", "file_name", default=defaults.export_file_name)),
        sheet_name=str(get_config_value("export", "sheet_name", default=defaults.sheet_name)),
        log_level=str(get_config_value("logging", "level", default=defaults.log_level)),
        server_name=str(get_config_value("server", "name", default=defaults.server_name)),
        server_port=int(get_config_value("server", "port", default=defaults.server_port)),
    )
