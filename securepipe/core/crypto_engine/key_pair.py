"""
Curve25519 key pairs for the handshake.

A fresh pair is generated for every connection endpoint and never
reused; only the public half ever goes on the wire.
"""

from nacl.public     import PrivateKey, PublicKey
from nacl.exceptions import CryptoError

from securepipe.utils.random_gen import SecureRandom
from .hash_crypto               import HashCrypto


class KeyPair:
    """Public/private Curve25519 key pair (32 bytes each)."""

    KEY_SIZE = PrivateKey.SIZE

    def __init__(self, private_key: PrivateKey):
        self.private_key = private_key
        self.public_key  = private_key.public_key

    # ── generation ───────────────────────────────────────────────
    @classmethod
    def generate(cls, random=SecureRandom.generate_bytes) -> "KeyPair":
        """Draw 32 private bytes from *random* and derive the public key."""
        seed = random(cls.KEY_SIZE)
        if len(seed) != cls.KEY_SIZE:
            raise ValueError(
                f"random source returned {len(seed)} of {cls.KEY_SIZE} bytes"
            )
        return cls(PrivateKey(seed))

    @classmethod
    def from_private_bytes(cls, data: bytes) -> "KeyPair":
        return cls(PrivateKey(data))

    # ── raw encodings ────────────────────────────────────────────
    @property
    def public_bytes(self) -> bytes:
        return bytes(self.public_key)

    @property
    def private_bytes(self) -> bytes:
        return bytes(self.private_key)

    @property
    def fingerprint(self) -> str:
        return HashCrypto.fingerprint(self.public_bytes)

    def __repr__(self):
        return f"<KeyPair public={self.fingerprint}>"


def load_public_key(data: bytes) -> PublicKey:
    """Parse a raw 32-byte public key received from a peer."""
    if len(data) != KeyPair.KEY_SIZE:
        raise ValueError(
            f"public key must be {KeyPair.KEY_SIZE} bytes, got {len(data)}"
        )
    try:
        return PublicKey(bytes(data))
    except CryptoError as exc:
        raise ValueError(f"invalid public key: {exc}") from exc
