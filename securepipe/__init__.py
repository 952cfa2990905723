"""
SecurePipe: an encrypted, authenticated byte stream over any socket.

Two peers swap fresh Curve25519 public keys, precompute a shared NaCl
box key, and exchange frames of ``nonce || XSalsa20-Poly1305``.
"""

from .config.settings      import Settings
from .errors               import (
    SecurePipeError, TransportError, ProtocolError, EndOfStream,
    DecryptionError, HandshakeError, ChannelClosedError,
)
from .core.crypto_engine   import KeyPair, SharedKey, SharedKeyDeriver
from .traffic              import (
    HandshakeProtocol, SecureReader, SecureWriter, SecureChannel,
    EchoServer, serve, dial,
)

__version__ = Settings.APP_VERSION

__all__ = [
    "Settings",
    "SecurePipeError", "TransportError", "ProtocolError", "EndOfStream",
    "DecryptionError", "HandshakeError", "ChannelClosedError",
    "KeyPair", "SharedKey", "SharedKeyDeriver",
    "HandshakeProtocol", "SecureReader", "SecureWriter", "SecureChannel",
    "EchoServer", "serve", "dial",
]
