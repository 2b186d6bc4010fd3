"""Shared fixtures: sample payloads and an in-process fake of the bgm.tv API."""

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from bgmtv import BangumiClient

FIXTURES = Path(__file__).parent / "fixtures"

USER_AGENT = "tester/bgmtv-tests/0.1 (https://example.com/bgmtv)"
GOOD_TOKEN = "good-token"

NOT_FOUND = {
    "title": "Not Found",
    "description": "resource can't be found in the database or has been removed",
    "details": {"path": "/", "method": "GET"},
}
UNAUTHORIZED = {
    "title": "Unauthorized",
    "description": "can't authorize user, please check your access token",
    "details": {},
}


def load_fixture(name: str) -> Any:
    return json.loads((FIXTURES / name).read_text(encoding="utf-8"))


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: dict
    headers: dict
    body: Any


@dataclass
class CannedResponse:
    status: int = 200
    body: Any = None
    raw: Optional[bytes] = None
    headers: dict = field(default_factory=dict)
    delay: float = 0
    require_token: Optional[str] = None


class FakeBangumi:
    """Serves canned responses per (method, path) and records every request."""

    def __init__(self):
        self.responses: dict[tuple[str, str], CannedResponse] = {}
        self.requests: list[RecordedRequest] = []

    def add(self, method: str, path: str, **kwargs: Any) -> None:
        self.responses[(method, path)] = CannedResponse(**kwargs)

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    async def handle(self, request: web.Request) -> web.StreamResponse:
        body = await request.read()
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.path,
                query=dict(request.query),
                headers=dict(request.headers),
                body=json.loads(body) if body else None,
            )
        )

        canned = self.responses.get((request.method, request.path))
        if canned is None:
            return web.json_response(NOT_FOUND, status=404)

        if canned.require_token is not None:
            if request.headers.get("Authorization") != f"Bearer {canned.require_token}":
                return web.json_response(UNAUTHORIZED, status=401)

        if canned.delay:
            await asyncio.sleep(canned.delay)

        if canned.raw is not None:
            return web.Response(
                status=canned.status,
                body=canned.raw,
                content_type="application/json",
                headers=canned.headers,
            )
        if canned.body is None:
            return web.Response(status=canned.status, headers=canned.headers)
        return web.json_response(canned.body, status=canned.status, headers=canned.headers)


@pytest.fixture
def fake_bgm() -> FakeBangumi:
    return FakeBangumi()


@pytest.fixture
async def bgm_server(fake_bgm):
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fake_bgm.handle)
    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def base_url(bgm_server) -> str:
    return f"http://{bgm_server.host}:{bgm_server.port}"


@pytest.fixture
async def http_client(base_url):
    """Client wired to the fake server."""
    client = BangumiClient.builder().base_url(base_url).user_agent(USER_AGENT).build()
    yield client
    await client.close()


@pytest.fixture
def subject_payload() -> dict:
    """Subject 3559 as returned by /v0/subjects/3559."""
    return load_fixture("subject_3559.json")


@pytest.fixture
def episodes_payload() -> dict:
    return load_fixture("episodes_page.json")


@pytest.fixture
def collections_payload() -> dict:
    return load_fixture("collections_page.json")


@pytest.fixture
def person_payload() -> dict:
    return load_fixture("person_detail.json")


@pytest.fixture
def character_payload() -> dict:
    return load_fixture("character_detail.json")
