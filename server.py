"""
Static File Server Lifecycle

This module binds the listening socket, runs the threaded WSGI server for the
static file application and turns listener failures into a logged, non-zero
process exit.
"""
import sys
import socket
import threading
import logging
from typing import Optional

from werkzeug.serving import BaseWSGIServer, make_server

from app import create_app
from config import ServerConfig

# Configure logging
logger = logging.getLogger(__name__)

# Server states
STARTING = "starting"
SERVING = "serving"
TERMINATED = "terminated"


class ServerError(Exception):
    """Raised when the listener fails while serving."""


class ServerStartupError(ServerError):
    """Raised when the listening socket cannot be bound."""


class StaticFileServer:
    """A threaded HTTP server exposing one root directory.

    The server starts in ``STARTING``, moves to ``SERVING`` once the socket is
    bound and ends in ``TERMINATED`` when the serve loop stops.
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self.state = STARTING
        self.app = create_app(config)
        self._server: Optional[BaseWSGIServer] = None
        self._lock = threading.Lock()
        self._looping = False
        self._shutdown_requested = False

    @property
    def port(self) -> int:
        """The bound port, which differs from the configured one when it was 0."""
        if self._server is None:
            return self.config.port
        return self._server.port

    @property
    def root_dir(self) -> str:
        return self.app.config["ROOT_DIR"]

    def bind(self) -> None:
        """Bind the listening socket.

        Raises:
            ServerStartupError: if the address is in use, the port is invalid
                or binding is not permitted
        """
        if self.state != STARTING:
            raise ServerError(f"Cannot bind a server in state {self.state}")

        try:
            # werkzeug prints and exits on bind failure, so bind here and
            # hand it the descriptor
            sock = socket.create_server((self.config.host, self.config.port))
        except (OSError, OverflowError) as e:
            self.state = TERMINATED
            raise ServerStartupError(
                f"Could not bind {self.config.host}:{self.config.port}: {e}"
            ) from e

        try:
            self._server = make_server(
                self.config.host,
                self.config.port,
                self.app,
                threaded=True,
                fd=sock.fileno(),
            )
        finally:
            # make_server duplicates the descriptor
            sock.close()

        self.state = SERVING
        logger.debug(f"Bound {self.config.host}:{self.port}")

    def serve_forever(self) -> None:
        """Block in the accept loop until shutdown() or a fatal error.

        Returns at once if shutdown() was already called.

        Raises:
            ServerError: if the server is not bound or the listener fails
                with an I/O error
        """
        with self._lock:
            if self._shutdown_requested:
                return
            if self.state != SERVING or self._server is None:
                raise ServerError(f"Cannot serve from state {self.state}")
            self._looping = True

        try:
            self._server.serve_forever()
        except OSError as e:
            raise ServerError(f"Listener failed: {e}") from e
        finally:
            self.state = TERMINATED

    def shutdown(self) -> None:
        """Stop the serve loop, or close the socket if the loop never ran.

        When the loop is running this blocks until serve_forever() returns.
        """
        with self._lock:
            self._shutdown_requested = True
            looping = self._looping

        if self._server is not None:
            if looping:
                self._server.shutdown()
            elif self.state == SERVING:
                self._server.server_close()
        self.state = TERMINATED


def run(config: ServerConfig) -> None:
    """Serve ``config.root_dir`` until interrupted.

    Any failure to bind or serve is logged and terminates the process with
    exit status 1.
    """
    server = StaticFileServer(config)
    try:
        server.bind()
        logger.info(f"serving {server.root_dir} on http://localhost:{server.port}")
        server.serve_forever()
    except ServerError as e:
        logger.critical(str(e))
        sys.exit(1)
