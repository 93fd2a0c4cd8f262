"""TCP server that answers RESP requests from a shared database."""

from __future__ import annotations

import logging
import signal
import socket
import sys
import threading
from typing import Optional

from lettuce.command_handler import CommandHandler
from lettuce.database import Database

logger = logging.getLogger(__name__)

DUMP_FILENAME = "dump.ldb"
BACKLOG = 10
RECEIVE_SIZE = 1023
_POLL_INTERVAL = 0.2


class LettuceServer:
    """Accepts clients one at a time and runs their commands.

    After each client disconnects the database is dumped to ``dump.ldb``.
    Once :meth:`run` has bound the socket, ``port`` holds the port in use
    and ``ready`` is set.
    """

    def __init__(self, port: int) -> None:
        self.port = port
        self.ready = threading.Event()
        self._running = threading.Event()
        self._running.set()
        self._server_socket: Optional[socket.socket] = None
        self._handler = CommandHandler()

    @property
    def is_running(self) -> bool:
        """True until :meth:`shutdown` is called."""
        return self._running.is_set()

    def _install_signal_handler(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return

        def on_signal(signum: int, frame: object) -> None:
            print(f"\nCaught signal: {signum}, shutting down...", flush=True)
            self.shutdown()
            sys.exit(signum)

        signal.signal(signal.SIGINT, on_signal)

    def shutdown(self) -> None:
        """Stop accepting clients and close the listening socket."""
        self._running.clear()
        if self._server_socket is not None:
            self._server_socket.close()
        logger.info("Server shutdown.")

    def run(self) -> None:
        """Listen on all interfaces and serve clients until shut down.

        Raises OSError if the socket cannot be bound or listened on.
        """
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            listener.bind(("", self.port))
            listener.listen(BACKLOG)
        except OSError:
            listener.close()
            raise
        listener.settimeout(_POLL_INTERVAL)
        self._server_socket = listener
        self.port = listener.getsockname()[1]
        self._install_signal_handler()
        logger.info("Lettuce server listening on port %d", self.port)
        self.ready.set()

        try:
            while self._running.is_set():
                try:
                    client, _ = listener.accept()
                except TimeoutError:
                    continue
                except OSError:
                    if not self._running.is_set():
                        break
                    logger.error("-ERR Accepting client connection")
                    continue
                logger.info("Client connected.")
                self._serve_client(client)
                self._dump()
        finally:
            listener.close()

    def _serve_client(self, client: socket.socket) -> None:
        with client:
            client.settimeout(_POLL_INTERVAL)
            while self._running.is_set():
                try:
                    data = client.recv(RECEIVE_SIZE)
                except TimeoutError:
                    continue
                except OSError as exc:
                    logger.warning("-ERR: Failed to receive data: %s", exc)
                    return
                if not data:
                    logger.info("Client disconnected.")
                    return
                try:
                    response = self._handler.handle_command(data)
                except ValueError as exc:
                    logger.error("-ERR: Malformed request: %s", exc)
                    return
                try:
                    client.sendall(response.encode("utf-8", "surrogateescape"))
                except OSError as exc:
                    logger.warning("-ERR: Failed to send response: %s", exc)
                    return
                logger.info("Sent response: %r", response)

    def _dump(self) -> None:
        try:
            Database.get_instance().dump(DUMP_FILENAME)
        except OSError as exc:
            logger.error("-ERR: failed to dump database: %s", exc)
        else:
            logger.info("Database dumped to %s", DUMP_FILENAME)