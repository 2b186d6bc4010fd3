"""
HTTP client implementations for the bgm.tv API.

Provides:
- Base HTTP client on aiohttp with error mapping
- Bangumi API client and its configuration builder
"""

from bgmtv.clients.base import BaseHTTPClient, HTTPMethod
from bgmtv.clients.bangumi import BangumiClient, ClientBuilder

__all__ = [
    "BaseHTTPClient",
    "HTTPMethod",
    "BangumiClient",
    "ClientBuilder",
]
