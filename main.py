"""
main.py
-------
Entry point for the neighborhood tree service.

Responsibilities:
    - Load configuration from the environment.
    - Wait for the database, initialize the schema, and build the repository.
    - Serve the HTTP API until SIGINT/SIGTERM or a server failure.
    - Close the repository exactly once on the way out.
"""

import signal
import sys
import threading

from config import ConfigError, load_config
from db.connection import DatabaseUnavailable, wait_for_database
from db.init_db import create_tables
from repositories.neighborhood_repo import NeighborhoodRepository
from server import HTTPServer, create_app
from utils.logger import get_logger, set_level

logger = get_logger(__name__)


def _install_signal_handlers(shutdown: threading.Event) -> None:
    def _on_signal(signum, frame) -> None:
        logger.info(f"main: received {signal.Signals(signum).name}")
        shutdown.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)


def run() -> int:
    """
    Run the service.

    Returns:
        Process exit code: 0 on a clean shutdown, 1 on any startup or
        serving error.
    """

    # ── 1. Configuration ──────────────────────────────────
    try:
        settings = load_config()
    except ConfigError as e:
        logger.error(f"error running app: {e}")
        return 1
    set_level(settings.log_level)

    # ── 2. Database ───────────────────────────────────────
    logger.info(f"Connecting to database at {settings.db_host}:{settings.db_port}...")
    try:
        db_pool = wait_for_database(settings)
    except DatabaseUnavailable as e:
        logger.error(f"error running app: {e}")
        return 1

    repo = NeighborhoodRepository(db_pool)
    try:
        create_tables(db_pool)

        # ── 3. HTTP server ────────────────────────────────
        server = HTTPServer(create_app(repo), settings.http_host, settings.http_port)
        shutdown = threading.Event()
        _install_signal_handlers(shutdown)
        server.start()

        # ── 4. Wait for a signal or a dead server ─────────
        while not shutdown.is_set() and not server.stopped.is_set():
            shutdown.wait(0.5)

        server.shutdown()
        if server.error is not None:
            logger.error(f"error running app: server error: {server.error}")
            return 1
        logger.info("main: server stopped")
        return 0
    except Exception as e:
        logger.error(f"error running app: {e}", exc_info=True)
        return 1
    finally:
        # ── 5. Cleanup on shutdown ────────────────────────
        logger.info("main: closing repository")
        repo.close()


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
