"""
Shared async HTTP helpers:
- One ClientSession for the Spotify calls
- Per-request timeouts
- Status and JSON-decoding errors
"""
from typing import Any

import aiohttp
from aiohttp import ClientResponse, ClientSession, TCPConnector


class HttpError(Exception):
    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"HTTP {status}: {message}")


class MalformedResponseError(ValueError):
    pass


def build_session() -> ClientSession:
    connector = TCPConnector(limit=4, ssl=True)
    return ClientSession(connector=connector, trust_env=False)


def request_timeout(seconds: float) -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=seconds)


async def raise_for_status(resp: ClientResponse, expected: int = 200) -> None:
    if resp.status != expected:
        body = await resp.text()
        raise HttpError(resp.status, body[:500])


async def read_json(resp: ClientResponse) -> Any:
    """Decode a JSON body regardless of the declared content type."""
    try:
        return await resp.json(content_type=None)
    except ValueError as exc:
        raise MalformedResponseError(f"invalid JSON body: {exc}") from exc
