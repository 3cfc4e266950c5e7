"""
server.py
---------
Flask application factory and the threaded HTTP server that hosts it.
"""

import threading
from typing import Optional

from flask import Flask
from werkzeug.exceptions import HTTPException
from werkzeug.serving import make_server

from handlers.common import handle_http_error, handle_neighborhood_error
from handlers.health_handler import health_bp
from handlers.house_handler import house_bp
from handlers.storm_handler import storm_bp
from handlers.tree_handler import tree_bp
from repositories.neighborhood_repo import NeighborhoodRepository
from utils.errors import NeighborhoodError
from utils.logger import get_logger

logger = get_logger(__name__)


def create_app(repo: NeighborhoodRepository) -> Flask:
    """
    Configure and return the Flask application.

    Args:
        repo: The repository every handler talks to. The app does not own
            it; whoever built it closes it.
    """
    app = Flask(__name__)
    app.neighborhood_repo = repo

    app.register_blueprint(health_bp)
    app.register_blueprint(house_bp)
    app.register_blueprint(tree_bp)
    app.register_blueprint(storm_bp)

    app.register_error_handler(NeighborhoodError, handle_neighborhood_error)
    app.register_error_handler(HTTPException, handle_http_error)
    return app


class HTTPServer:
    """
    Runs a WSGI app on a background thread, one thread per request.

    `error` holds the exception that stopped the serve loop, if any.
    """

    def __init__(self, app: Flask, host: str, port: int):
        self._server = make_server(host, port, app, threaded=True)
        # Non-daemon request threads are joined by server_close().
        self._server.daemon_threads = False
        self._thread: Optional[threading.Thread] = None
        self.stopped = threading.Event()
        self.error: Optional[BaseException] = None

    @property
    def port(self) -> int:
        return self._server.server_port

    def start(self) -> None:
        self._thread = threading.Thread(target=self._serve, name="http-server", daemon=True)
        self._thread.start()
        logger.info(f"web service listening on port {self.port}")

    def _serve(self) -> None:
        try:
            self._server.serve_forever()
        except Exception as e:
            self.error = e
        finally:
            self.stopped.set()

    def shutdown(self) -> None:
        """Stop accepting requests, then wait for in-flight requests to finish."""
        if self._thread is not None and self._thread.is_alive():
            self._server.shutdown()
            self._thread.join()
        self._server.server_close()
