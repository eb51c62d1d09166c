"""
Playback snapshot aggregation.
Combines the player state and the user profile into one "what is playing now" view.

Dependencies: providers (session + Web API client)
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from logging_config import get_logger
from providers.errors import UpstreamCallError
from providers.spotify_api import SpotifyAPI, get_shared_spotify_client
from providers.spotify_auth import SpotifySession, get_shared_session

logger = get_logger(__name__)

# Returned by /getPlayingTrackInfo when nothing is playing
PLACEHOLDER_TRACK_INFO: Dict[str, Any] = {
    "trackName": "N/A",
    "trackId": -1,
    "trackTimeSeconds": 0,
    "trackLengthSeconds": 0,
    "trackLoopedState": "off",
    "shuffleEnabled": False,
    "isPlaying": False,
    "artistNames": ["N/A"],
    "isPremium": False,
}


@dataclass(frozen=True)
class PlaybackSnapshot:
    track_name: str
    track_id: str
    track_time_seconds: int
    track_length_seconds: int
    repeat_state: str
    shuffle_enabled: bool
    is_playing: bool
    artist_names: Tuple[str, ...]
    album_cover_url: str
    is_premium: bool

    def to_dict(self) -> Dict[str, Any]:
        """Wire format expected by the plugin"""
        return {
            "trackName": self.track_name,
            "trackId": self.track_id,
            "trackTimeSeconds": self.track_time_seconds,
            "trackLengthSeconds": self.track_length_seconds,
            "trackLoopedState": self.repeat_state,
            "shuffleEnabled": self.shuffle_enabled,
            "isPlaying": self.is_playing,
            "artistNames": list(self.artist_names),
            "albumCoverUrl": self.album_cover_url,
            "isPremium": self.is_premium,
        }


def ms_to_seconds(ms: Optional[int]) -> int:
    """Whole seconds, rounded down. Missing values count as 0."""
    return int(ms or 0) // 1000


def first_image_url(album: Dict[str, Any]) -> str:
    images = album.get("images") or []
    if not images:
        return ""
    return images[0].get("url") or ""


def build_snapshot(player_state: Dict[str, Any], is_premium: bool) -> PlaybackSnapshot:
    """Pure conversion of a /me/player payload with an active item"""
    item = player_state["item"]
    return PlaybackSnapshot(
        track_name=item["name"],
        track_id=item["id"],
        track_time_seconds=ms_to_seconds(player_state.get("progress_ms")),
        track_length_seconds=ms_to_seconds(item.get("duration_ms")),
        repeat_state=player_state.get("repeat_state"),
        shuffle_enabled=player_state.get("shuffle_state") or False,
        is_playing=bool(player_state.get("is_playing")),
        artist_names=tuple(artist["name"] for artist in item.get("artists", [])),
        album_cover_url=first_image_url(item.get("album") or {}),
        is_premium=is_premium,
    )


async def is_premium_account(session: SpotifySession, api: SpotifyAPI) -> bool:
    """True when the profile's product tier is premium; any failure counts as not premium"""
    try:
        await session.ensure_token()
        profile = await api.get_profile()
    except Exception as e:
        logger.error(f"Error fetching user profile: {e}")
        return False
    return (profile or {}).get("product") == "premium"


async def get_currently_playing(
    session: Optional[SpotifySession] = None,
    api: Optional[SpotifyAPI] = None
) -> Optional[PlaybackSnapshot]:
    """
    Build a fresh snapshot of the current playback.

    Returns None when nothing is playing or when the player state cannot be read,
    so callers always have something renderable. A failed token refresh is not
    swallowed: AuthRefreshError propagates to the caller.
    """
    session = session or get_shared_session()
    api = api or get_shared_spotify_client()

    await session.ensure_token()

    try:
        player_state = await api.get_player_state()
    except UpstreamCallError as e:
        logger.error(f"Error getting currently playing track: {e}")
        return None

    if not player_state or not player_state.get("item"):
        logger.debug("No track currently playing")
        return None

    # Profile is fetched after the player state, not concurrently
    premium = await is_premium_account(session, api)

    try:
        return build_snapshot(player_state, premium)
    except (KeyError, TypeError) as e:
        logger.error(f"Malformed player state, missing {e}")
        return None
