"""
One-round public-key exchange.

Flow
----
1. Server  → its 32-byte public key
2. Client  → its 32-byte public key

Each side generates a fresh Curve25519 key pair per connection.  The
keys travel unauthenticated: whoever answers first is trusted, so this
exchange offers no protection against an active man-in-the-middle.
"""

import logging
from typing import NamedTuple

from nacl.public import PublicKey

from securepipe.core.crypto_engine import KeyPair, HashCrypto, load_public_key
from securepipe.errors             import HandshakeError, SecurePipeError
from securepipe.utils.framing      import read_exact, write_all, KEY_SIZE
from securepipe.utils.random_gen   import SecureRandom

logger = logging.getLogger("SecurePipe.Handshake")


class HandshakeResult(NamedTuple):
    local_keys:    KeyPair
    remote_public: PublicKey


class HandshakeProtocol:
    """
    Role-asymmetric key exchange over an already-connected transport.

    Any short read, short write, end-of-stream, transport failure or
    unusable random source raises ``HandshakeError``; the caller must
    then close the connection without building a channel.
    """

    def __init__(self, random=SecureRandom.generate_bytes):
        self._random       = random
        self.local_keys:    KeyPair   | None = None
        self.remote_public: PublicKey | None = None

    # ── server side ──────────────────────────────────────────────
    def server_hello(self, transport) -> HandshakeResult:
        """Send our key first, then read the client's."""
        self.local_keys = self._generate_keys()
        self._send_key(transport, "server")
        self.remote_public = self._recv_key(transport, "client")

        logger.info(
            "Server handshake complete — client key %s",
            HashCrypto.fingerprint(self.remote_public),
        )
        return HandshakeResult(self.local_keys, self.remote_public)

    # ── client side ──────────────────────────────────────────────
    def client_hello(self, transport) -> HandshakeResult:
        """Read the server's key, then answer with ours."""
        self.remote_public = self._recv_key(transport, "server")
        self.local_keys = self._generate_keys()
        self._send_key(transport, "client")

        logger.info(
            "Client handshake complete — server key %s",
            HashCrypto.fingerprint(self.remote_public),
        )
        return HandshakeResult(self.local_keys, self.remote_public)

    # ── internal ─────────────────────────────────────────────────
    def _send_key(self, transport, role: str):
        try:
            write_all(transport, self.local_keys.public_bytes,
                      f"{role} public key")
        except SecurePipeError as exc:
            raise HandshakeError(f"could not send {role} public key: {exc}") from exc

    def _recv_key(self, transport, role: str) -> PublicKey:
        try:
            data = read_exact(transport, KEY_SIZE, f"{role} public key")
        except SecurePipeError as exc:
            raise HandshakeError(f"could not read {role} public key: {exc}") from exc
        return load_public_key(data)

    def _generate_keys(self) -> KeyPair:
        try:
            return KeyPair.generate(self._random)
        except ValueError as exc:
            raise HandshakeError(f"could not generate key pair: {exc}") from exc
