"""
System Utils Package

Request-scoped playback logic built on top of the Spotify providers:
    metadata.py  - Playback snapshot aggregation
    controls.py  - Play/pause, skip, shuffle and repeat commands
    image.py     - Cover art to pixel grid conversion

External code can use:
    from system_utils import get_currently_playing, pixelize
"""

from .metadata import (
    PLACEHOLDER_TRACK_INFO,
    PlaybackSnapshot,
    get_currently_playing,
)

from .controls import (
    cycle_repeat,
    next_track,
    pause,
    previous_track,
    toggle_play,
    toggle_shuffle,
)

from .image import (
    PixelSample,
    fallback_grid,
    grid_to_json,
    pixelize,
)
