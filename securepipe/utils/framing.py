"""
Fixed-size field I/O for the SecurePipe wire protocol.

Wire layout
-----------
    handshake:  [32 B public key]                 (each direction once)
    frame:      [24 B nonce][N + 16 B ciphertext]

Frames carry no length prefix: the reader bounds the ciphertext by the
capacity its caller offers plus the 16-byte authenticator.
"""

from securepipe.config.settings import Settings
from securepipe.errors          import EndOfStream, ProtocolError, TransportError

KEY_SIZE   = Settings.KEY_SIZE
NONCE_SIZE = Settings.NONCE_SIZE
OVERHEAD   = Settings.OVERHEAD


def read_exact(transport, n: int, field: str = "field") -> bytes:
    """
    Read exactly *n* bytes from *transport*.

    Raises ``EndOfStream`` if the stream ends before the first byte and
    ``ProtocolError`` if it ends part-way through the field.
    """
    buf = bytearray()
    while len(buf) < n:
        chunk = transport.read(n - len(buf))
        if not chunk:
            if not buf:
                raise EndOfStream(f"end of stream before {field}")
            raise ProtocolError(
                f"truncated {field}: got {len(buf)} of {n} bytes"
            )
        buf.extend(chunk)
    return bytes(buf)


def write_all(transport, data: bytes, field: str = "field") -> int:
    """Write *data* in one call; anything short of the full length fails."""
    n = transport.write(data)
    if n != len(data):
        raise TransportError(
            f"short write of {field}: wrote {n} of {len(data)} bytes"
        )
    return n
