"""Shared helpers."""

from bgmtv.utils.logger import LogTimer, get_logger, setup_logging

__all__ = ["LogTimer", "get_logger", "setup_logging"]
