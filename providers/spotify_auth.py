"""
Spotify Session Manager
Owns the single bearer token used for every Web API call and refreshes it on demand
"""
import asyncio
import threading
import time
from typing import Any, Dict, Optional

from spotipy.cache_handler import MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from config import SPOTIFY
from logging_config import get_logger
from providers.errors import AuthRefreshError

logger = get_logger(__name__)


class SpotifySession:
    """
    Process-wide holder of the bearer credential.

    The token is never validated proactively: an empty token triggers a refresh in
    ensure_token(), anything else is trusted until an upstream call rejects it.
    Refreshes are not serialized against each other. Only the swap of the stored
    value is locked, so concurrent refreshes leave one complete token behind and
    the last one to finish wins.
    """

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self._settings = settings if settings is not None else SPOTIFY
        self._token = ""
        self._token_lock = threading.Lock()

        self.refresh_count = 0
        self.failed_refresh_count = 0
        self.invalidation_count = 0
        self.last_refresh_at: Optional[float] = None

    @property
    def token(self) -> str:
        """Current bearer token, empty string when absent"""
        return self._token

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def _set_token(self, value: str) -> None:
        with self._token_lock:
            self._token = value

    def invalidate(self) -> None:
        """Drop the current token so the next ensure_token() refreshes"""
        if self._token:
            logger.info("Invalidating Spotify access token")
        self.invalidation_count += 1
        self._set_token("")

    def _create_oauth(self) -> SpotifyOAuth:
        # Missing client id/secret/redirect uri raise SpotifyOauthError here,
        # which is why the manager is only built when a refresh is attempted.
        oauth = SpotifyOAuth(
            client_id=self._settings["client_id"],
            client_secret=self._settings["client_secret"],
            redirect_uri=self._settings["redirect_uri"],
            scope=self._settings.get("scope"),
            cache_handler=MemoryCacheHandler(),
            open_browser=False
        )
        token_url = self._settings.get("token_url")
        if token_url:
            oauth.OAUTH_TOKEN_URL = token_url
        return oauth

    def _exchange_refresh_token(self) -> str:
        """Blocking token exchange, run in the default executor"""
        refresh_token = self._settings.get("refresh_token")
        if not refresh_token:
            raise AuthRefreshError("Access token refresh failed", "SPOTIFY_REFRESH_TOKEN is not set")

        oauth = self._create_oauth()
        token_info = oauth.refresh_access_token(refresh_token)
        access_token = token_info.get("access_token") if isinstance(token_info, dict) else None
        if not access_token:
            raise AuthRefreshError("Access token refresh failed", "No access_token in token response")
        return access_token

    async def refresh(self) -> str:
        """
        Exchange the configured refresh token for a new access token.

        Returns the new token. On any failure the stored token is cleared and
        AuthRefreshError is raised with the upstream error payload attached.
        """
        logger.debug("Refreshing Spotify access token")
        loop = asyncio.get_running_loop()
        try:
            access_token = await loop.run_in_executor(None, self._exchange_refresh_token)
        except AuthRefreshError as e:
            self._fail_refresh(e.payload)
            raise
        except SpotifyOauthError as e:
            payload = {"error": e.error, "error_description": e.error_description} if e.error else str(e)
            self._fail_refresh(payload)
            raise AuthRefreshError("Access token refresh failed", payload) from e
        except Exception as e:
            self._fail_refresh(str(e))
            raise AuthRefreshError("Access token refresh failed", str(e)) from e

        self._set_token(access_token)
        self.refresh_count += 1
        self.last_refresh_at = time.time()
        logger.info("Spotify access token refreshed")
        return access_token

    def _fail_refresh(self, payload: Any) -> None:
        logger.error(f"Error refreshing access token: {payload}")
        self.failed_refresh_count += 1
        self._set_token("")

    async def ensure_token(self) -> str:
        """Refresh only when no token is held; never checks an existing one upstream"""
        if not self._token:
            return await self.refresh()
        return self._token


# Process-wide singleton
_shared_session: Optional[SpotifySession] = None


def get_shared_session() -> SpotifySession:
    """Return the single session shared by every route"""
    global _shared_session
    if _shared_session is None:
        _shared_session = SpotifySession()
    return _shared_session


def reset_shared_session() -> None:
    """Forget the shared session (used when the process config changes, and by tests)"""
    global _shared_session
    _shared_session = None
