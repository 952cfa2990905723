"""
Hashing helpers, used to print short fingerprints of public keys.
"""

from cryptography.hazmat.primitives import hashes


class HashCrypto:
    """Static helpers for hashing and key fingerprints."""

    @staticmethod
    def sha256(data: bytes) -> bytes:
        d = hashes.Hash(hashes.SHA256())
        d.update(data)
        return d.finalize()

    @staticmethod
    def fingerprint(public_key: bytes, length: int = 8) -> str:
        """Colon-separated hex of the first *length* bytes of SHA-256."""
        digest = HashCrypto.sha256(bytes(public_key))[:length]
        return ":".join(f"{b:02x}" for b in digest)
