"""
Exception hierarchy for the SecurePipe channel layer.

    SecurePipeError
    ├── TransportError        (also ConnectionError)
    │   └── ProtocolError     fixed-size field truncated mid-field
    ├── EndOfStream           (also EOFError) peer hung up between fields
    ├── DecryptionError       (also ValueError) authentication failed
    ├── HandshakeError        key exchange aborted
    └── ChannelClosedError    (also ValueError) use after close()

Every failure is terminal for the connection it happened on; nothing in
the package retries.
"""


class SecurePipeError(Exception):
    """Base class for every error raised by SecurePipe."""


class TransportError(SecurePipeError, ConnectionError):
    """The underlying transport failed or accepted fewer bytes than required."""


class ProtocolError(TransportError):
    """A fixed-size field (nonce, public key) arrived truncated."""


class EndOfStream(SecurePipeError, EOFError):
    """Clean end-of-stream before the first byte of a new field."""


class DecryptionError(SecurePipeError, ValueError):
    """Ciphertext failed authentication (tampered, truncated or mis-keyed)."""


class HandshakeError(SecurePipeError):
    """The public-key exchange could not be completed."""


class ChannelClosedError(SecurePipeError, ValueError):
    """Read or write attempted on a closed channel."""
