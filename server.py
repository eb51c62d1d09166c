from quart import Quart, jsonify

from config import SERVER
from logging_config import get_logger
from system_utils import (
    PLACEHOLDER_TRACK_INFO,
    get_currently_playing,
    grid_to_json,
    fallback_grid,
    pixelize,
    pause,
    toggle_play,
    next_track,
    previous_track,
    toggle_shuffle,
    cycle_repeat,
)

logger = get_logger(__name__)

app = Quart(__name__)

@app.after_request
async def add_cache_headers(response):
    """Everything served here is live state - never let the plugin cache it"""
    response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
    response.headers['Pragma'] = 'no-cache'
    response.headers['Expires'] = '0'
    return response

# --- Routes ---

@app.route("/handshake")
async def handshake():
    """Identity probe used by the plugin to find the relay"""
    return SERVER["name"]

@app.route("/getPlayingTrackInfo")
async def get_playing_track_info():
    try:
        track = await get_currently_playing()
    except Exception as e:
        logger.error(f"Error fetching track info: {e}", exc_info=True)
        return "Error fetching track info", 500

    if not track:
        return jsonify(PLACEHOLDER_TRACK_INFO)
    return jsonify(track.to_dict())

@app.route("/getAlbumCoverPixelData")
async def get_album_cover_pixel_data():
    try:
        track = await get_currently_playing()
        if not track or not track.album_cover_url:
            return jsonify(grid_to_json(fallback_grid()))

        grid = await pixelize(track.album_cover_url)
        return jsonify(grid_to_json(grid))
    except Exception as e:
        logger.error(f"Error processing image: {e}", exc_info=True)
        return "Error processing image", 500

# --- Playback controls ---
# Bare 200 on success, generic 500 text on any failure.

async def _run_control(command, failure_message: str):
    try:
        await command()
    except Exception as e:
        logger.error(f"{failure_message}: {e}")
        return failure_message, 500
    return "", 200

@app.route("/pause", methods=['POST'])
async def pause_route():
    return await _run_control(pause, "Failed to pause")

@app.route("/togglePlay", methods=['POST'])
async def toggle_play_route():
    return await _run_control(toggle_play, "Failed to toggle playback")

@app.route("/next", methods=['POST'])
async def next_route():
    return await _run_control(next_track, "Failed to skip next")

@app.route("/previous", methods=['POST'])
async def previous_route():
    return await _run_control(previous_track, "Failed to skip previous")

@app.route("/toggleShuffle", methods=['POST'])
async def toggle_shuffle_route():
    return await _run_control(toggle_shuffle, "Failed to toggle shuffle")

@app.route("/cycleLoopState", methods=['POST'])
async def cycle_loop_state_route():
    return await _run_control(cycle_repeat, "Failed to cycle loop state")
