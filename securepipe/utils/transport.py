"""
Blocking socket adapter that gives the channel layer plain
``read`` / ``write`` / ``close`` semantics.

Socket errors surface as ``TransportError`` so callers only have to deal
with the SecurePipe hierarchy.
"""

import socket
import threading
import logging

from securepipe.core.stream_base import Readable, Writable, Closeable
from securepipe.errors           import TransportError

logger = logging.getLogger("SecurePipe.Transport")


class SocketTransport(Readable, Writable, Closeable):
    """Wrap a connected stream socket."""

    def __init__(self, sock: socket.socket):
        self.sock    = sock
        self._closed = False
        self._lock   = threading.Lock()
        try:
            self.peer_addr = sock.getpeername()
        except OSError:
            self.peer_addr = None

    def readinto(self, buffer) -> int:
        try:
            return self.sock.recv_into(buffer)
        except OSError as exc:
            raise TransportError(f"read failed: {exc}") from exc

    def write(self, data: bytes) -> int:
        try:
            self.sock.sendall(data)
        except OSError as exc:
            raise TransportError(f"write failed: {exc}") from exc
        return len(data)

    def settimeout(self, timeout: float | None):
        self.sock.settimeout(timeout)

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True
        # shutdown first so a read blocked in another thread returns now
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        try:
            self.sock.close()
        except OSError:
            logger.debug("Error closing socket", exc_info=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self):
        return f"<SocketTransport peer={self.peer_addr} closed={self._closed}>"
