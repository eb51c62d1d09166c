import asyncio
import logging
import signal
import sys

from hypercorn.asyncio import serve
from hypercorn.config import Config

from config import DEBUG, SERVER
from logging_config import setup_logging, get_logger
from server import app

logger = get_logger(__name__)


def build_hypercorn_config() -> Config:
    host = SERVER.get("host", "127.0.0.1")
    port = SERVER.get("port", 52100)

    config = Config()
    config.bind = [f"{host}:{port}"]
    config.use_reloader = False
    config.graceful_timeout = 2
    config.shutdown_timeout = 2
    config.debug = False
    return config


async def run_server() -> None:
    """
    Serve the Quart app with Hypercorn until SIGINT/SIGTERM.
    """
    config = build_hypercorn_config()

    # Mute unnecessary logging
    logging.getLogger('hypercorn.error').setLevel(logging.ERROR)
    logging.getLogger('hypercorn.access').setLevel(logging.ERROR)

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C raises KeyboardInterrupt instead
            pass

    logger.info(f"Bloxify server running at http://localhost:{SERVER['port']}")
    await serve(app, config, shutdown_trigger=shutdown_event.wait)
    logger.info("Server stopped")


def main() -> None:
    setup_logging(
        console_level=DEBUG.get("log_level", "INFO"),
        file_level="DEBUG" if DEBUG.get("log_detailed", False) else "INFO",
        console=DEBUG.get("log_to_console", True),
        log_file=DEBUG.get("log_file", "bloxify.log"),
        max_bytes=DEBUG["log_rotation"]["max_bytes"],
        backup_count=DEBUG["log_rotation"]["backup_count"]
    )

    try:
        logger.info(f"Starting {SERVER['name']}...")
        asyncio.run(run_server())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt caught in main...")
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
