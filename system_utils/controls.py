"""
Playback controls.

Toggle-style commands read the current player state, compute the next value and
issue exactly one write. There is no compare-and-set: two toggles racing each other
can both read the same state. For play/pause that just sends the same command twice;
for the repeat cycle both writes land on the same next mode instead of advancing twice.
"""
from __future__ import annotations
from typing import Any, Dict, Optional

from config import SPOTIFY
from logging_config import get_logger
from providers.spotify_api import SpotifyAPI, get_shared_spotify_client

logger = get_logger(__name__)

REPEAT_CYCLE = {
    "off": "context",
    "context": "track",
    "track": "off",
}


def next_repeat_state(current: Optional[str]) -> str:
    # Absent reads as "off"; anything unrecognised falls back to "off"
    return REPEAT_CYCLE.get(current or "off", "off")


def next_shuffle_state(current: Optional[bool]) -> bool:
    return not (current or False)


def next_play_action(is_playing: Optional[bool]) -> str:
    return "pause" if is_playing else "play"


async def _prepare(api: Optional[SpotifyAPI]) -> SpotifyAPI:
    api = api or get_shared_spotify_client()
    # Off by default: control commands go out with whatever token is held, even none.
    if SPOTIFY.get("ensure_token_on_controls"):
        await api.session.ensure_token()
    return api


async def _read_state(api: SpotifyAPI) -> Dict[str, Any]:
    return await api.get_player_state() or {}


async def pause(api: Optional[SpotifyAPI] = None) -> None:
    api = await _prepare(api)
    await api.pause()


async def next_track(api: Optional[SpotifyAPI] = None) -> None:
    api = await _prepare(api)
    await api.next_track()


async def previous_track(api: Optional[SpotifyAPI] = None) -> None:
    api = await _prepare(api)
    await api.previous_track()


async def toggle_play(api: Optional[SpotifyAPI] = None) -> str:
    """Pause when playing, play otherwise. Returns the action sent."""
    api = await _prepare(api)
    state = await _read_state(api)
    action = next_play_action(state.get("is_playing"))
    if action == "pause":
        await api.pause()
    else:
        await api.play()
    return action


async def toggle_shuffle(api: Optional[SpotifyAPI] = None) -> bool:
    """Flip shuffle. Returns the state written."""
    api = await _prepare(api)
    state = await _read_state(api)
    new_state = next_shuffle_state(state.get("shuffle_state"))
    await api.set_shuffle(new_state)
    return new_state


async def cycle_repeat(api: Optional[SpotifyAPI] = None) -> str:
    """Advance the repeat mode off -> context -> track -> off. Returns the mode written."""
    api = await _prepare(api)
    state = await _read_state(api)
    new_mode = next_repeat_state(state.get("repeat_state"))
    logger.debug(f"Repeat mode {state.get('repeat_state')} -> {new_mode}")
    await api.set_repeat(new_mode)
    return new_mode
