"""
Encrypted stream codecs and the channel that composes them.

Every ``write`` puts exactly one frame on the transport:

    [nonce (24 B, clear)][Poly1305 tag (16 B) + XSalsa20 ciphertext]

Frames have no length prefix, so the reader cannot tell where one
ciphertext ends.  It takes the ciphertext from a single transport read
of at most ``capacity + 16`` bytes and authenticates exactly what that
read returned.  A frame is decoded only when it arrives whole in that
read and nothing of the next frame comes with it:

  * a message longer than the caller's buffer arrives truncated,
  * a frame the transport delivers in pieces arrives truncated,
  * two frames coalesced into one read arrive joined,

and each of these raises ``DecryptionError`` with no plaintext
released.  The connection is unusable afterwards.  Waiting for more
bytes after a failed check would block forever on a tampered frame
whose sender is waiting for a reply, so a failure is never retried.
Peers that need arbitrary message sizes over TCP must keep messages
small enough to arrive in one segment, or alternate strictly between
write and read as the echo exchange does.
"""

import time
import threading
import logging

from securepipe.core.stream_base   import Readable, Writable, Closeable
from securepipe.core.crypto_engine import SharedKey, SharedKeyDeriver
from securepipe.errors             import (
    ChannelClosedError, EndOfStream, ProtocolError, SecurePipeError,
)
from securepipe.utils.framing    import read_exact, write_all, NONCE_SIZE, OVERHEAD
from securepipe.utils.random_gen import SecureRandom

logger = logging.getLogger("SecurePipe.Channel")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Reader
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class SecureReader(Readable):
    """
    Decrypt one frame per call from a borrowed transport.

    A clean end-of-stream before the nonce yields ``0`` / ``b""``.
    A truncated nonce raises ``ProtocolError``; a frame that fails
    authentication raises ``DecryptionError`` and nothing is copied
    into the caller's buffer.
    """

    def __init__(self, transport, shared_key: SharedKey):
        self._transport = transport
        self._key       = shared_key

    def readinto(self, buffer) -> int:
        capacity = len(buffer)
        if capacity == 0:
            return 0

        try:
            nonce = read_exact(self._transport, NONCE_SIZE, "nonce")
        except EndOfStream:
            return 0

        ciphertext = self._transport.read(capacity + OVERHEAD)
        if not ciphertext:
            raise ProtocolError("end of stream between nonce and ciphertext")

        plaintext = self._key.decrypt(ciphertext, nonce)

        # One read, one authentication attempt.  Bytes beyond the caller's
        # capacity are discarded; with the ciphertext bounded above this
        # cannot trigger for an authentic frame.
        n = min(len(plaintext), capacity)
        buffer[:n] = plaintext[:n]
        return n


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Writer
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class SecureWriter(Writable):
    """Encrypt each ``write`` into one frame on a borrowed transport."""

    def __init__(self, transport, shared_key: SharedKey,
                 random=SecureRandom.generate_bytes):
        self._transport = transport
        self._key       = shared_key
        self._random    = random

    def write(self, data: bytes) -> int:
        """
        Returns the number of plaintext bytes delivered, i.e. the bytes
        that reached the transport minus the nonce and the tag.
        """
        data = bytes(data)
        if not data:
            return 0

        nonce = self._random(NONCE_SIZE)
        if len(nonce) != NONCE_SIZE:
            raise SecurePipeError(
                f"random source returned {len(nonce)} of {NONCE_SIZE} nonce bytes"
            )
        ciphertext = self._key.encrypt(data, nonce)

        # nothing reaches the wire unless the whole frame was built
        write_all(self._transport, nonce, "nonce")
        written = write_all(self._transport, ciphertext, "ciphertext")
        return written - OVERHEAD


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Channel
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class SecureChannel(Readable, Writable, Closeable):
    """
    Bidirectional encrypted stream over one transport.

    The channel owns the transport: ``close()`` closes it exactly once,
    and any read or write afterwards raises ``ChannelClosedError``.
    The reader and writer share a single precomputed ``SharedKey``.

    Parameters
    ----------
    transport
        Object with ``read(n)``, ``write(data)`` and ``close()``.
    shared_key : SharedKey
        Output of ``SharedKeyDeriver.derive``.
    session_id : str | None
        Identifier used in logs; a random one is generated if *None*.
    peer_addr : tuple | None
        Remote address, informational only.
    random
        ``random(n) -> bytes`` used for nonces.
    """

    def __init__(self, transport, shared_key: SharedKey,
                 session_id: str | None = None,
                 peer_addr: tuple | None = None,
                 random=SecureRandom.generate_bytes):
        self.transport      = transport
        self.session_id     = session_id or SecureRandom.generate_session_id()
        self.peer_addr      = peer_addr
        self.created_at     = time.time()
        self.last_activity  = self.created_at
        self.bytes_sent     = 0
        self.bytes_received = 0

        self._reader = SecureReader(transport, shared_key)
        self._writer = SecureWriter(transport, shared_key, random)
        self._closed = False
        self._lock   = threading.Lock()

    @classmethod
    def from_keys(cls, transport, local_private, remote_public,
                  **kwargs) -> "SecureChannel":
        """Derive the shared key once and build the channel on it."""
        shared_key = SharedKeyDeriver.derive(local_private, remote_public)
        return cls(transport, shared_key, **kwargs)

    # ── I/O ──────────────────────────────────────────────────────
    def readinto(self, buffer) -> int:
        self._check_open()
        try:
            n = self._reader.readinto(buffer)
        except SecurePipeError as exc:
            if self._closed:
                raise ChannelClosedError("channel closed during read") from exc
            raise
        if self._closed:
            raise ChannelClosedError("channel closed during read")
        self.bytes_received += n
        self.last_activity   = time.time()
        return n

    def write(self, data: bytes) -> int:
        self._check_open()
        try:
            n = self._writer.write(data)
        except SecurePipeError as exc:
            if self._closed:
                raise ChannelClosedError("channel closed during write") from exc
            raise
        self.bytes_sent   += n
        self.last_activity = time.time()
        return n

    # ── lifecycle ────────────────────────────────────────────────
    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.transport.close()
        logger.debug("Session %s closed", self.session_id)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active(self) -> bool:
        return not self._closed

    def _check_open(self):
        if self._closed:
            raise ChannelClosedError("channel closed")

    def info(self) -> dict:
        peer = (f"{self.peer_addr[0]}:{self.peer_addr[1]}"
                if self.peer_addr else "unknown")
        return {
            "session_id":     self.session_id,
            "peer":           peer,
            "created":        self.created_at,
            "last_activity":  self.last_activity,
            "bytes_sent":     self.bytes_sent,
            "bytes_received": self.bytes_received,
            "active":         self.active,
        }

    def __repr__(self):
        return f"<SecureChannel {self.session_id} closed={self._closed}>"
