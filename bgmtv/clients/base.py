"""
Base HTTP client built on aiohttp.

Provides:
- Lazily created (or borrowed) aiohttp session with connection pooling
- One request per call, no retries
- Mapping of transport failures and error statuses to the
  client's error taxonomy
"""

import asyncio
import json
from enum import Enum
from typing import Any, Dict, Mapping, NamedTuple, Optional

import aiohttp

from bgmtv.domain.errors import ApiError, TransportError
from bgmtv.utils.logger import LogTimer, get_logger

logger = get_logger(__name__)


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"
    DELETE = "DELETE"


class RawResponse(NamedTuple):
    status: int
    reason: Optional[str]
    headers: Mapping[str, str]
    body: bytes


def clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Prepare query parameters for aiohttp.

    None values are dropped, booleans become "true"/"false" and enums are
    sent by value.
    """
    if not params:
        return None

    cleaned: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, Enum):
            value = value.value
        cleaned[key] = value
    return cleaned or None


def parse_error_body(body: bytes) -> Dict[str, Any]:
    """Extract title/description/details from a bgm.tv error body, if it is JSON."""
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


class BaseHTTPClient:
    """
    Async HTTP client shared by API bindings.

    The session is created on first use and closed by close() or by leaving
    an `async with` block. A session passed in by the caller is borrowed:
    it is used as-is and never closed here.
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the base client.

        Args:
            base_url: API root, without trailing slash
            headers: Headers attached to every request
            timeout: Total request timeout in seconds (None keeps aiohttp's default)
            session: Existing aiohttp session to borrow
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = dict(headers or {})
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def headers(self) -> Dict[str, str]:
        """Copy of the headers sent with every request."""
        return dict(self._headers)

    @property
    def owns_session(self) -> bool:
        return self._owns_session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the owned session, if one was opened."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("HTTP session closed", base_url=self.base_url)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        allow_redirects: bool = True
    ) -> RawResponse:
        """
        Perform exactly one request and return the raw response.

        Raises:
            TransportError: If no HTTP response was received
            ApiError: If the response status is 4xx or 5xx
        """
        method = HTTPMethod(method).value
        url = f"{self.base_url}{path}"

        request_kwargs: Dict[str, Any] = {
            "params": clean_params(params),
            "headers": {**self._headers, **(headers or {})},
            "allow_redirects": allow_redirects,
        }
        if json_body is not None:
            request_kwargs["json"] = json_body
        if self.timeout is not None:
            request_kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)

        session = self._get_session()
        if session.closed:
            raise TransportError(
                f"{method} {url} failed: the borrowed aiohttp session is closed",
                method=method,
                url=url
            )

        with LogTimer(logger, f"{method} {path}", method=method, path=path) as timer:
            try:
                async with session.request(method, url, **request_kwargs) as response:
                    raw = RawResponse(
                        status=response.status,
                        reason=response.reason,
                        headers=response.headers.copy(),
                        body=await response.read(),
                    )
            except asyncio.TimeoutError as e:
                raise TransportError(
                    f"{method} {url} timed out", method=method, url=url
                ) from e
            except aiohttp.ClientError as e:
                raise TransportError(
                    f"{method} {url} failed: {e.__class__.__name__}: {e}",
                    method=method,
                    url=url
                ) from e

            timer.extra_context["status"] = raw.status

            if raw.status >= 400:
                error_body = parse_error_body(raw.body)
                title = error_body.get("title")
                raise ApiError(
                    status=raw.status,
                    message=error_body.get("description") or title or raw.reason or "HTTP error",
                    title=title,
                    details=error_body.get("details"),
                    method=method,
                    url=url,
                )

        return raw

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Optional[bytes]:
        """
        Perform one request and return the undecoded JSON body.

        Bodies are validated by the caller in strict JSON mode (see
        bgmtv.domain.decode), so they are not parsed here.

        Returns:
            Body bytes, or None when the body is empty (e.g. 202/204)

        Raises:
            TransportError: If no HTTP response was received
            ApiError: If the response status is 4xx or 5xx
        """
        raw = await self.send(
            method, path, params=params, json_body=json_body, headers=headers
        )

        if not raw.body.strip():
            return None
        return raw.body

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Optional[bytes]:
        return await self.request("GET", path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Optional[bytes]:
        return await self.request(
            "POST", path, params=params, json_body=json_body, headers=headers
        )

    async def patch(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Optional[bytes]:
        return await self.request(
            "PATCH", path, params=params, json_body=json_body, headers=headers
        )
