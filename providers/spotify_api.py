"""
Spotify API Integration
Thin wrappers around the Web API player and profile endpoints
"""
import asyncio
from typing import Any, Callable, Dict, Optional

import requests
import spotipy

from logging_config import get_logger
from providers.errors import UpstreamCallError
from providers.spotify_auth import SpotifySession, get_shared_session

logger = get_logger(__name__)

REPEAT_STATES = ("off", "context", "track")


class SpotifyAPI:
    """
    Stateless client for the player and profile endpoints.

    The bearer token is read from the session on every call and none of the
    calls refresh it; whoever orchestrates a request decides whether to call
    session.ensure_token() first.
    """

    def __init__(self, session: SpotifySession, timeout: float = 5):
        self.session = session
        self.timeout = timeout  # spotipy's default request timeout

        # Request tracking
        self.request_stats = {
            'total_requests': 0,
            'api_calls': {},
            'errors': {
                'http': 0,
                'network': 0,
            }
        }

    def _client(self) -> spotipy.Spotify:
        # Built per call so a refresh between calls is picked up. Retries are off:
        # a failed call is reported as-is.
        return spotipy.Spotify(
            auth=self.session.token,
            requests_timeout=self.timeout,
            retries=0,
            status_retries=0
        )

    async def _call(self, operation: str, method: Callable[[spotipy.Spotify], Any]) -> Any:
        self.request_stats['total_requests'] += 1
        calls = self.request_stats['api_calls']
        calls[operation] = calls.get(operation, 0) + 1

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, lambda: method(self._client()))
        except spotipy.exceptions.SpotifyException as e:
            self.request_stats['errors']['http'] += 1
            logger.error(f"Spotify {operation} failed ({e.http_status}): {e.msg}")
            raise UpstreamCallError(operation, e.http_status) from e
        except (requests.exceptions.RequestException, ValueError) as e:
            self.request_stats['errors']['network'] += 1
            logger.error(f"Spotify {operation} failed: {e}")
            raise UpstreamCallError(operation, e) from e

    # Reads

    async def get_profile(self) -> Dict[str, Any]:
        """GET /me"""
        return await self._call("get_profile", lambda sp: sp.current_user())

    async def get_player_state(self) -> Optional[Dict[str, Any]]:
        """GET /me/player, None when nothing is active (204)"""
        return await self._call("get_player_state", lambda sp: sp.current_playback())

    # Writes

    async def pause(self) -> None:
        logger.info("Pausing playback")
        await self._call("pause", lambda sp: sp.pause_playback())

    async def play(self) -> None:
        logger.info("Resuming playback")
        await self._call("play", lambda sp: sp.start_playback())

    async def next_track(self) -> None:
        logger.info("Skipping to next track")
        await self._call("next", lambda sp: sp.next_track())

    async def previous_track(self) -> None:
        logger.info("Going to previous track")
        await self._call("previous", lambda sp: sp.previous_track())

    async def set_shuffle(self, state: bool) -> None:
        logger.info(f"Setting shuffle to {state}")
        await self._call("set_shuffle", lambda sp: sp.shuffle(bool(state)))

    async def set_repeat(self, mode: str) -> None:
        if mode not in REPEAT_STATES:
            raise ValueError(f"Invalid repeat mode: {mode!r}")
        logger.info(f"Setting repeat mode to {mode}")
        await self._call("set_repeat", lambda sp: sp.repeat(mode))

    def get_request_stats(self) -> Dict[str, Any]:
        """Get current API request statistics"""
        return {
            'Total Requests': self.request_stats['total_requests'],
            'API Calls': dict(self.request_stats['api_calls']),
            'Errors': dict(self.request_stats['errors']),
        }


# Shared singleton bound to the shared session
_shared_client: Optional[SpotifyAPI] = None


def get_shared_spotify_client() -> SpotifyAPI:
    """
    Return the process-wide SpotifyAPI instance.

    Every route uses the same instance so request statistics are consolidated.
    """
    global _shared_client
    if _shared_client is None:
        _shared_client = SpotifyAPI(get_shared_session())
    return _shared_client


def reset_shared_spotify_client() -> None:
    global _shared_client
    _shared_client = None
