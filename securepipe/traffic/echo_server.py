"""
SecurePipe encrypted echo server and client dialer.

Server
------
Listens for TCP connections.  Every accepted connection is handled in
its own daemon thread:

    handshake (server role) → derive shared key → SecureChannel
    → read one message → write it back → close

A failing connection is logged and closed; the accept loop carries on.

Client
------
``dial(address)`` connects, runs the client handshake and returns a
ready ``SecureChannel``.
"""

import socket
import threading
import logging

from securepipe.config.settings        import Settings
from securepipe.errors                 import HandshakeError, SecurePipeError, TransportError
from securepipe.traffic.handshake      import HandshakeProtocol
from securepipe.traffic.secure_channel import SecureChannel
from securepipe.traffic.session_manager import SessionManager
from securepipe.utils.random_gen       import SecureRandom
from securepipe.utils.transport        import SocketTransport

logger = logging.getLogger("SecurePipe.Server")


def _fmt_addr(addr) -> str:
    if isinstance(addr, tuple) and len(addr) >= 2:
        return f"{addr[0]}:{addr[1]}"
    return str(addr)


def _echo(data: bytes) -> bytes:
    return data


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Echo Server  (listens → handshakes → echoes)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class EchoServer:
    """
    Parameters
    ----------
    host, port
        Address for ``start()``.  Port 0 picks a free port.
    max_exchanges : int | None
        Request/response cycles per connection before closing.
        *None* echoes until the peer hangs up.
    buffer_size : int
        Read capacity for each incoming message.
    handshake_timeout : float | None
        Socket timeout applied while the handshake runs.
    handler : callable
        ``handler(data: bytes) -> bytes`` producing the reply.
    session_manager : SessionManager | None
        Live-channel registry; one is created if *None*.
    """

    def __init__(
        self,
        host: str = Settings.LISTEN_HOST,
        port: int = 0,
        max_exchanges: int | None = Settings.ECHO_EXCHANGES,
        buffer_size: int = Settings.BUFFER_SIZE,
        handshake_timeout: float | None = Settings.HANDSHAKE_TIMEOUT,
        handler=_echo,
        session_manager: SessionManager | None = None,
    ):
        self.host = host
        self.port = port
        self.max_exchanges     = max_exchanges
        self.buffer_size       = buffer_size
        self.handshake_timeout = handshake_timeout
        self.handler           = handler
        self.session_manager   = session_manager or SessionManager()

        self._listener: socket.socket | None = None
        self._running = False
        self._accept_thread: threading.Thread | None = None

    # ── lifecycle ────────────────────────────────────────────────
    def start(self):
        """Bind, listen and run the accept loop in a background thread."""
        if self._running:
            logger.warning("Echo server already running")
            return

        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind((self.host, self.port))
        listener.listen(Settings.LISTEN_BACKLOG)
        self.port = listener.getsockname()[1]

        self._accept_thread = threading.Thread(
            target=self.serve, args=(listener,),
            daemon=True, name="EchoAccept",
        )
        self._running = True
        self._listener = listener
        self._accept_thread.start()

    def serve(self, listener: socket.socket):
        """
        Accept connections on *listener* until ``stop()`` is called or
        the listener is closed.  Blocks the calling thread.
        """
        self._listener = listener
        self._running  = True
        listener.settimeout(Settings.ACCEPT_POLL_INTERVAL)
        logger.info("Echo server listening on %s",
                    _fmt_addr(listener.getsockname()))

        while self._running:
            try:
                sock, addr = listener.accept()
            except socket.timeout:
                continue
            except OSError:
                if self._running:
                    logger.info("Listener closed, stopping accept loop")
                break

            logger.info("Incoming connection from %s", _fmt_addr(addr))
            threading.Thread(
                target=self._handle_connection,
                args=(sock, addr),
                daemon=True,
                name=f"Echo-{_fmt_addr(addr)}",
            ).start()
        self._running = False

    def stop(self):
        """Close the listener and every live channel."""
        self._running = False
        if self._listener:
            try:
                self._listener.close()
            except OSError:
                pass
            self._listener = None
        self.session_manager.close_all()

        if self._accept_thread and self._accept_thread.is_alive():
            self._accept_thread.join(timeout=5)
        logger.info("Echo server stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> tuple[str, int]:
        return (self.host or "127.0.0.1", self.port)

    # ── per-connection handler ───────────────────────────────────
    def _handle_connection(self, sock: socket.socket, addr):
        transport = SocketTransport(sock)
        channel: SecureChannel | None = None

        try:
            transport.settimeout(self.handshake_timeout)
            result = HandshakeProtocol().server_hello(transport)
            transport.settimeout(None)

            channel = SecureChannel.from_keys(
                transport, result.local_keys, result.remote_public,
                peer_addr=addr,
            )
            self.session_manager.add(channel)
            logger.info("Session %s established with %s",
                        channel.session_id, _fmt_addr(addr))

            self._echo_loop(channel)

        except HandshakeError as exc:
            logger.warning("Handshake with %s failed: %s", _fmt_addr(addr), exc)
        except SecurePipeError as exc:
            logger.warning("Session with %s aborted: %s", _fmt_addr(addr), exc)
        except Exception:
            logger.error("Connection handler error (%s)", _fmt_addr(addr),
                         exc_info=True)
        finally:
            if channel:
                self.session_manager.remove(channel.session_id)
            transport.close()

    def _echo_loop(self, channel: SecureChannel):
        exchanges = 0
        while self.max_exchanges is None or exchanges < self.max_exchanges:
            data = channel.read(self.buffer_size)
            if not data:
                logger.info("Session %s closed by peer", channel.session_id)
                return
            channel.write(self.handler(data))
            exchanges += 1
        logger.debug("Session %s done after %d exchange(s)",
                     channel.session_id, exchanges)


def serve(listener: socket.socket, **kwargs):
    """Run an ``EchoServer`` on an existing listening socket (blocking)."""
    EchoServer(**kwargs).serve(listener)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Client
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
def _split_address(address) -> tuple[str, int]:
    if isinstance(address, tuple):
        return address[0], int(address[1])
    host, _, port = str(address).rpartition(":")
    if not port.isdigit():
        raise ValueError(f"address must be host:port, got {address!r}")
    host = host.strip("[]") or Settings.CONNECT_HOST
    return host, int(port)


def dial(address,
         handshake_timeout: float | None = Settings.HANDSHAKE_TIMEOUT,
         random=SecureRandom.generate_bytes) -> SecureChannel:
    """
    Connect to *address* (``"host:port"`` or a tuple), run the client
    handshake and return the resulting ``SecureChannel``.
    """
    host, port = _split_address(address)
    try:
        sock = socket.create_connection((host, port), timeout=handshake_timeout)
    except OSError as exc:
        raise TransportError(f"could not connect to {host}:{port}: {exc}") from exc

    transport = SocketTransport(sock)
    try:
        result = HandshakeProtocol(random).client_hello(transport)
        transport.settimeout(None)
        channel = SecureChannel.from_keys(
            transport, result.local_keys, result.remote_public,
            peer_addr=(host, port), random=random,
        )
    except SecurePipeError as exc:
        logger.warning("Dial: closing connection because: %s", exc)
        transport.close()
        raise

    logger.info("Connected to %s:%d (session %s)", host, port, channel.session_id)
    return channel
