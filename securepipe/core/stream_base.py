"""
Capability interfaces for byte streams.

SecureReader, SecureWriter, SecureChannel and SocketTransport each
implement only the capabilities they offer, so a test can swap any
transport for an in-memory one (``io.BytesIO`` already speaks
``read`` / ``write`` / ``close``).
"""

from abc import ABC, abstractmethod


class Readable(ABC):
    """Something that yields bytes; ``b""`` / ``0`` means end-of-stream."""

    @abstractmethod
    def readinto(self, buffer) -> int:
        """Fill *buffer* with up to ``len(buffer)`` bytes, return the count."""

    def read(self, size: int) -> bytes:
        buf = bytearray(size)
        n = self.readinto(buf)
        return bytes(buf[:n])

    def readable(self) -> bool:
        return True


class Writable(ABC):

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write *data*, return the number of caller bytes delivered."""

    def writable(self) -> bool:
        return True


class Closeable(ABC):

    @abstractmethod
    def close(self):
        """Release the resource. Calling twice is harmless."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """True once ``close()`` has run."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
