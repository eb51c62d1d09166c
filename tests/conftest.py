"""Pytest configuration and shared fixtures"""
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

import pytest

from providers.spotify_api import SpotifyAPI, reset_shared_spotify_client
from providers.spotify_auth import SpotifySession, reset_shared_session

SPOTIFY_TEST_SETTINGS = {
    "client_id": "test-client-id",
    "client_secret": "test-client-secret",
    "refresh_token": "test-refresh-token",
    "redirect_uri": "http://127.0.0.1:52100/callback",
    "token_url": "https://accounts.example.test/api/token",
    "scope": ["user-read-playback-state"],
    "ensure_token_on_controls": False,
}


def player_state(**overrides):
    """A /me/player payload with an active track"""
    state = {
        "is_playing": True,
        "progress_ms": 61_500,
        "shuffle_state": False,
        "repeat_state": "off",
        "item": {
            "id": "4uLU6hMCjMI75M1A2tKUQC",
            "name": "Never Gonna Give You Up",
            "duration_ms": 213_573,
            "artists": [{"name": "Rick Astley"}, {"name": "Stock Aitken Waterman"}],
            "album": {
                "images": [
                    {"url": "https://i.scdn.co/image/large", "height": 640},
                    {"url": "https://i.scdn.co/image/small", "height": 64},
                ]
            },
        },
    }
    state.update(overrides)
    return state


@pytest.fixture(autouse=True)
def reset_singletons():
    reset_shared_session()
    reset_shared_spotify_client()
    yield
    reset_shared_session()
    reset_shared_spotify_client()


@pytest.fixture
def spotify_settings():
    """Patch the process config so the shared session has credentials"""
    with patch.dict("config.SPOTIFY", SPOTIFY_TEST_SETTINGS):
        yield


@pytest.fixture
def session():
    return SpotifySession(dict(SPOTIFY_TEST_SETTINGS))


@pytest.fixture
def mock_oauth():
    """Patch spotipy's OAuth manager; each refresh hands out 'fresh-token'"""
    with patch("providers.spotify_auth.SpotifyOAuth") as oauth_cls:
        oauth_cls.return_value.refresh_access_token.return_value = {
            "access_token": "fresh-token",
            "token_type": "Bearer",
            "expires_in": 3600,
        }
        yield oauth_cls


@pytest.fixture
def mock_spotify():
    """Patch spotipy.Spotify; every call made by SpotifyAPI lands on spotify_cls.return_value"""
    with patch("providers.spotify_api.spotipy.Spotify") as spotify_cls:
        spotify_cls.return_value.current_playback.return_value = player_state()
        spotify_cls.return_value.current_user.return_value = {"id": "user", "product": "premium"}
        yield spotify_cls


@pytest.fixture
def api(session):
    """A SpotifyAPI double whose async methods are AsyncMocks"""
    client = MagicMock(spec=SpotifyAPI)
    client.session = session
    client.get_player_state.return_value = player_state()
    client.get_profile.return_value = {"product": "premium"}
    return client
