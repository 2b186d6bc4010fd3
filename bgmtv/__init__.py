"""
Async client for the bangumi.tv (bgm.tv) API.

Example:
    >>> from bgmtv import BangumiClient
    >>> async with BangumiClient.builder().user_agent("me/app/1.0").build() as client:
    ...     subject = await client.get_subject(3559)
"""

from bgmtv.clients import BangumiClient, ClientBuilder
from bgmtv.config import ClientConfig, Settings, get_settings
from bgmtv.domain import *  # noqa: F401,F403
from bgmtv.domain import __all__ as _domain_all

__version__ = "0.1.0"

__all__ = [
    "BangumiClient",
    "ClientBuilder",
    "ClientConfig",
    "Settings",
    "get_settings",
    *_domain_all,
]
