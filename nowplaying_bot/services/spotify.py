"""
Spotify service.
- OAuth2 refresh-token exchange (a fresh access token for every query).
- "Currently playing" lookup via Spotify Web API.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from nowplaying_bot.services.models import Track
from nowplaying_bot.utils.http_client import (
    MalformedResponseError,
    raise_for_status,
    read_json,
    request_timeout,
)

logger = logging.getLogger(__name__)

_TOKEN_URL = "https://accounts.spotify.com/api/token"
_API_BASE = "https://api.spotify.com/v1"


class SpotifyError(Exception):
    pass


class SpotifyClient:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        timeout: float = 10,
        token_url: str = _TOKEN_URL,
        api_base: str = _API_BASE,
    ):
        self._session = session
        self._auth = aiohttp.BasicAuth(client_id, client_secret)
        self._refresh_token = refresh_token
        self._timeout = request_timeout(timeout)
        self._token_url = token_url
        self._api_base = api_base

    async def get_access_token(self) -> str:
        form = {
            "grant_type": "refresh_token",
            "refresh_token": self._refresh_token,
        }
        try:
            async with self._session.post(
                self._token_url,
                data=form,
                auth=self._auth,
                timeout=self._timeout,
            ) as resp:
                await raise_for_status(resp)
                payload = await read_json(resp)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise SpotifyError(f"Token request failed: {exc!r}") from exc
        except MalformedResponseError as exc:
            raise SpotifyError(f"Token response unreadable: {exc}") from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise SpotifyError("Token response has no access_token")
        return token

    async def get_currently_playing(self) -> Optional[Track]:
        """
        Return the track on the user's player, or None when nothing is playing.
        Raises HttpError for unexpected statuses, SpotifyError otherwise.
        """
        token = await self.get_access_token()
        headers = {"Authorization": f"Bearer {token}"}
        try:
            async with self._session.get(
                f"{self._api_base}/me/player/currently-playing",
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                if resp.status == 204:
                    return None
                await raise_for_status(resp)
                data = await read_json(resp)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise SpotifyError(f"Currently-playing request failed: {exc!r}") from exc
        except MalformedResponseError as exc:
            raise SpotifyError(f"Currently-playing response unreadable: {exc}") from exc

        return _parse_current(data)


def _parse_current(data) -> Optional[Track]:
    if not isinstance(data, dict):
        raise SpotifyError("Currently-playing response is not an object")

    item = data.get("item")
    if not item:
        # Ads and unsupported media report 200 with a null item
        logger.info(
            "Player active without a track",
            extra={"type": data.get("currently_playing_type")},
        )
        return None

    try:
        name = item["name"]
        artists = tuple(a["name"] for a in item.get("artists") or [])
    except (KeyError, TypeError) as exc:
        raise SpotifyError(f"Unexpected track payload: {exc!r}") from exc
    return Track(name=name, artists=artists)
