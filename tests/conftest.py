"""
Shared fixtures: key material, in-memory and socket transports, and a
running echo server on a free localhost port.
"""

import io
import socket

import pytest

from securepipe.core.crypto_engine import KeyPair, SharedKeyDeriver
from securepipe.traffic            import EchoServer
from securepipe.utils.transport    import SocketTransport


class CountingTransport(io.BytesIO):
    """BytesIO that remembers how often it was closed."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        super().close()


class ShortWriteTransport(io.BytesIO):
    """Accepts one byte less than asked on write number *short_on*."""

    def __init__(self, short_on: int = 1):
        super().__init__()
        self.short_on = short_on
        self.writes   = 0

    def write(self, data):
        self.writes += 1
        if self.writes == self.short_on:
            return super().write(bytes(data)[:-1])
        return super().write(data)


@pytest.fixture
def alice():
    return KeyPair.generate()


@pytest.fixture
def bob():
    return KeyPair.generate()


@pytest.fixture
def shared_key(alice, bob):
    return SharedKeyDeriver.derive(alice, bob.public_key)


@pytest.fixture
def socket_pair():
    """Two connected SocketTransports with a safety timeout."""
    a, b = socket.socketpair()
    a.settimeout(5)
    b.settimeout(5)
    left, right = SocketTransport(a), SocketTransport(b)
    yield left, right
    left.close()
    right.close()


@pytest.fixture
def raw_socket_pair():
    """A SocketTransport paired with the bare socket on the other end."""
    a, b = socket.socketpair()
    a.settimeout(5)
    b.settimeout(5)
    transport = SocketTransport(a)
    yield transport, b
    transport.close()
    b.close()


def _running_server(**kwargs):
    server = EchoServer(host="127.0.0.1", port=0, handshake_timeout=5, **kwargs)
    server.start()
    return server


@pytest.fixture
def echo_server():
    server = _running_server()
    yield server
    server.stop()


@pytest.fixture
def multi_echo_server():
    server = _running_server(max_exchanges=None)
    yield server
    server.stop()
