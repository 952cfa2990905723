"""
SecurePipe traffic layer.
"""

from .handshake       import HandshakeProtocol, HandshakeResult
from .secure_channel  import SecureReader, SecureWriter, SecureChannel
from .session_manager import SessionManager
from .echo_server     import EchoServer, serve, dial

__all__ = [
    "HandshakeProtocol",
    "HandshakeResult",
    "SecureReader",
    "SecureWriter",
    "SecureChannel",
    "SessionManager",
    "EchoServer",
    "serve",
    "dial",
]
