"""
Spotify Providers Package
Session management and Web API access for the relay.
"""
from .errors import AuthRefreshError, BloxifyError, ImageProcessingError, UpstreamCallError
from .spotify_auth import SpotifySession, get_shared_session
from .spotify_api import SpotifyAPI, get_shared_spotify_client

__all__ = [
    'AuthRefreshError',
    'BloxifyError',
    'ImageProcessingError',
    'UpstreamCallError',
    'SpotifySession',
    'SpotifyAPI',
    'get_shared_session',
    'get_shared_spotify_client',
]
