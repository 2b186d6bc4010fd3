"""Configuration for the bgmtv client."""

from bgmtv.config.client import ClientConfig
from bgmtv.config.settings import DEFAULT_BASE_URL, Settings, get_settings

__all__ = ["ClientConfig", "DEFAULT_BASE_URL", "Settings", "get_settings"]
