"""
Shared-key derivation and the authenticated cipher built on it.

The Curve25519 agreement is far more expensive than XSalsa20-Poly1305,
so it runs once per connection (NaCl ``crypto_box_beforenm``) and the
resulting 32-byte key is handed to both the reader and the writer.

Key:        32 bytes, identical on both ends
Nonce:      24 bytes, fresh per frame
Overhead:   16 bytes (Poly1305 tag, prepended to the ciphertext)
"""

import logging

from nacl.public     import Box, PrivateKey, PublicKey
from nacl.exceptions import CryptoError

from securepipe.config.settings import Settings
from securepipe.errors          import DecryptionError, HandshakeError
from .key_pair                  import KeyPair, load_public_key

logger = logging.getLogger("SecurePipe.SharedKey")


class SharedKey:
    """A precomputed NaCl box key."""

    KEY_SIZE   = Settings.KEY_SIZE
    NONCE_SIZE = Settings.NONCE_SIZE
    OVERHEAD   = Settings.OVERHEAD

    def __init__(self, box: Box):
        self._box = box

    @classmethod
    def from_bytes(cls, key: bytes) -> "SharedKey":
        """Wrap an already-derived 32-byte key."""
        if len(key) != cls.KEY_SIZE:
            raise ValueError(
                f"shared key must be {cls.KEY_SIZE} bytes, got {len(key)}"
            )
        return cls(Box.decode(bytes(key)))

    def encrypt(self, plaintext: bytes, nonce: bytes) -> bytes:
        """Return ``tag + ciphertext`` (the nonce is not included)."""
        return self._box.encrypt(bytes(plaintext), nonce).ciphertext

    def decrypt(self, ciphertext: bytes, nonce: bytes) -> bytes:
        try:
            return self._box.decrypt(bytes(ciphertext), nonce)
        except CryptoError as exc:
            raise DecryptionError("ciphertext failed authentication") from exc

    def __bytes__(self) -> bytes:
        return self._box.shared_key()

    def __repr__(self):
        return "<SharedKey>"


class SharedKeyDeriver:
    """Turn (local private key, remote public key) into a ``SharedKey``."""

    @staticmethod
    def derive(local_private, remote_public) -> SharedKey:
        """
        Parameters
        ----------
        local_private : KeyPair | PrivateKey | bytes
        remote_public : PublicKey | bytes

        By symmetry of the agreement, ``derive(privA, pubB)`` equals
        ``derive(privB, pubA)``.
        """
        if isinstance(local_private, KeyPair):
            local_private = local_private.private_key
        elif not isinstance(local_private, PrivateKey):
            local_private = PrivateKey(bytes(local_private))
        if not isinstance(remote_public, PublicKey):
            remote_public = load_public_key(remote_public)

        try:
            box = Box(local_private, remote_public)
        except CryptoError as exc:
            # libsodium rejects low-order peer points
            raise HandshakeError("key agreement failed") from exc
        logger.debug("Shared key derived")
        return SharedKey(box)
