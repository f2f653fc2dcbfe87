"""
Shared fixtures for unit tests.

No test leaves the loopback interface. Sockets, backoff sleeps and broadcast-address
enumeration are replaced with the fakes defined here, except for the loopback
exchange tests in test_udp_socket.py, which use real UDP sockets on 127.0.0.1.
"""

import asyncio
import socket

import pytest

from revogi_smart_strip import BroadcastDispatcher, UdpTransport


class FakeSocket:
    """Stands in for UdpSocketWrapper.

    Replies are looked up by destination address when sendto() is called; once the
    scripted replies are used up every receive() times out.
    """

    def __init__(self, network):
        self.network = network
        self.open_count = 0
        self.close_count = 0
        self.receive_count = 0
        self.sent = []
        self._script = []

    async def open(self):
        self.open_count += 1
        if self.network.open_error is not None:
            raise self.network.open_error

    def sendto(self, data, addr):
        if self.network.send_error is not None:
            raise self.network.send_error
        self.sent.append((data, addr))
        self._script = list(self.network.replies.get(addr[0], []))

    async def receive(self, timeout):
        self.receive_count += 1
        if self._script:
            item = self._script.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        raise asyncio.TimeoutError()

    def close(self):
        self.close_count += 1


class FakeNetwork:
    """A scripted network: maps a destination IP address to the items its socket receives.

    Each item is either a (payload: bytes, (host, port)) tuple or an exception to raise.
    """

    def __init__(self):
        self.replies = {}
        self.sockets = []
        self.open_error = None
        self.send_error = None

    def socket_factory(self):
        sock = FakeSocket(self)
        self.sockets.append(sock)
        return sock

    def add_reply(self, destination, payload, sender=None):
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        self.replies.setdefault(destination, []).append((payload, (sender or destination, 8888)))

    def add_error(self, destination, exc):
        self.replies.setdefault(destination, []).append(exc)

    @property
    def sent(self):
        return [item for sock in self.sockets for item in sock.sent]


class SleepRecorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def fake_network():
    return FakeNetwork()


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def transport(fake_network, sleep_recorder):
    """UdpTransport with default retry settings, wired to the fake network."""
    return UdpTransport(socket_factory=fake_network.socket_factory, sleep=sleep_recorder)


@pytest.fixture
def make_dispatcher(transport):
    """Builds a BroadcastDispatcher over the fake transport for a fixed list of broadcast addresses."""

    def _make(addresses):
        return BroadcastDispatcher(transport=transport, broadcast_addresses=addresses)

    return _make


@pytest.fixture
def unresolvable_host(monkeypatch):
    """Makes the running loop fail to resolve the returned host name."""
    host = "unresolvable.strip.test"

    async def _install():
        loop = asyncio.get_running_loop()
        real_getaddrinfo = loop.getaddrinfo

        async def fake_getaddrinfo(h, *args, **kwargs):
            if h == host:
                raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
            return await real_getaddrinfo(h, *args, **kwargs)

        monkeypatch.setattr(loop, "getaddrinfo", fake_getaddrinfo)
        return host

    return _install
