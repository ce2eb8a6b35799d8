"""
Configuration loading following kkb_fastapi pattern.

Each environment has its own TOML file under app/cfg.
"""
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import toml

from app.utils.constants import (
    DEFAULT_FUZZY_THRESHOLD,
    DEFAULT_REGION,
    FACTOR_CACHE_TTL_SECONDS,
    ConfigFile,
)

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "cfg"

__all__ = ["Config", "ConfigFile", "get_config", "get_factor_settings_from_config"]


class Config:
    """Parsed configuration file."""

    def __init__(self, config_file: str):
        self.config_file = config_file
        self.path = CONFIG_DIR / config_file
        self.data: dict[str, Any] = toml.load(self.path)

    def __repr__(self):
        return f"<Config: {self.config_file}>"


@lru_cache
def get_config(config_file: str = ConfigFile.DEVELOPMENT) -> Config:
    """
    Load configuration for the given file name.

    Args:
        config_file: Configuration file name (e.g., "production.toml")

    Returns:
        Config instance with the parsed TOML in ``data``
    """
    return Config(config_file)


def get_factor_settings_from_config(config: Config | None = None) -> dict[str, Any]:
    """
    Get emission factor resolution settings.

    Reads the [emission_factors] section of the given config, or of the config
    for the environment named by ENVIRONMENT when none is given.

    Returns:
        dict with cache_ttl_seconds, default_region, use_store and
        fuzzy_match_threshold
    """
    settings = {
        "cache_ttl_seconds": FACTOR_CACHE_TTL_SECONDS,
        "default_region": DEFAULT_REGION,
        "use_store": True,
        "fuzzy_match_threshold": DEFAULT_FUZZY_THRESHOLD,
    }
    try:
        if config is None:
            env = os.getenv("ENVIRONMENT", "development")
            config = get_config(f"{env}.toml")
        settings.update(config.data.get("emission_factors", {}))
    except Exception as e:
        logger.warning(
            f"Failed to read emission factor settings from config: {e}. Using defaults"
        )
    return settings
