#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
UdpSocketWrapper and UdpTransport -- the lowest layer of the package.

  UdpSocketWrapper owns one asyncio UDP endpoint bound to an ephemeral local port, and offers
  sendto() plus a timed receive().

  UdpTransport.send() opens a fresh UdpSocketWrapper, sends one datagram to a destination,
  and collects replies in a bounded receive loop with linear backoff:

      while timeout_count < max_timeout_count:
          receive one datagram, waiting at most receive_timeout
          on timeout or socket error:
              timeout_count += 1
              sleep timeout_count * timeout_base_value
          otherwise keep the reply and receive again

  Successful receives do not count against max_timeout_count, since a broadcast may be answered
  by several strips. With the defaults a destination that never answers costs 0.8s + 1.6s of
  sleep plus two receive timeouts. The socket is closed on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
import socket

from revogi_smart_strip.internal_types import *
from .pkg_logging import logger as pkg_logger
from .constants import (
    REVOGI_PORT,
    MAX_TIMEOUT_COUNT,
    TIMEOUT_BASE_VALUE,
    DEFAULT_RECEIVE_TIMEOUT,
    MAX_DATAGRAM_SIZE,
  )
from .responses import UdpResponse

ReceivedItem = Union[Tuple[bytes, HostAndPort], Exception]

class _UdpSocketProtocol(asyncio.DatagramProtocol):
    """An adapter between the asyncio transport and UdpSocketWrapper. Received datagrams and
       transport errors are queued in arrival order."""

    queue: asyncio.Queue[ReceivedItem]

    def __init__(self, queue: asyncio.Queue[ReceivedItem]):
        self.queue = queue

    def datagram_received(self, data: bytes, addr: Tuple[str, int]):
        """Called when some datagram is received."""
        self.queue.put_nowait((data, (addr[0], addr[1])))

    def error_received(self, exc: Exception):
        """Called when a send or receive operation raises an OSError.

        (Other than BlockingIOError or InterruptedError.)
        """
        self.queue.put_nowait(exc)

class UdpSocketWrapper:
    """A UDP socket with broadcast enabled, bound to an ephemeral port on all local interfaces."""

    max_datagram_size: int
    queue: asyncio.Queue[ReceivedItem]
    _transport: Optional[asyncio.DatagramTransport] = None
    _closed: bool = False

    def __init__(self, max_datagram_size: int=MAX_DATAGRAM_SIZE):
        self.max_datagram_size = max_datagram_size
        self.queue = asyncio.Queue()

    async def open(self) -> None:
        loop = asyncio.get_running_loop()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.bind(('', 0))
            untyped_transport, _ = await loop.create_datagram_endpoint(
                lambda: _UdpSocketProtocol(self.queue),
                sock=sock
              )
        except BaseException:
            sock.close()
            raise
        # asyncio datagram transports do not inherit from asyncio.DatagramTransport
        self._transport = untyped_transport # type: ignore[assignment]

    def sendto(self, data: bytes, addr: HostAndPort) -> None:
        if self._transport is None:
            raise OSError("UdpSocketWrapper is not open")
        self._transport.sendto(data, addr)

    async def receive(self, timeout: float) -> Tuple[bytes, HostAndPort]:
        """Waits at most timeout seconds for the next datagram.

        Raises asyncio.TimeoutError if nothing arrives in time, or the OSError reported by the
        transport since the previous receive.
        """
        item = await asyncio.wait_for(self.queue.get(), timeout)
        if isinstance(item, Exception):
            raise item
        data, addr = item
        return (data[:self.max_datagram_size], addr)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            if self._transport is not None:
                self._transport.close()
                self._transport = None

class UdpTransport:
    """Sends a single datagram to a destination and collects the replies."""

    port: int
    max_timeout_count: int
    timeout_base_value: float
    receive_timeout: float

    def __init__(
            self,
            port: int=REVOGI_PORT,
            max_timeout_count: int=MAX_TIMEOUT_COUNT,
            timeout_base_value: float=TIMEOUT_BASE_VALUE,
            receive_timeout: float=DEFAULT_RECEIVE_TIMEOUT,
            socket_factory: Callable[[], UdpSocketWrapper]=UdpSocketWrapper,
            sleep: Callable[[float], Awaitable[Any]]=asyncio.sleep,
            logger: Optional[logging.Logger]=None,
          ) -> None:
        """Create a UdpTransport.

        Parameters:
            port:               The UDP port datagrams are sent to. Defaults to 8888.
            max_timeout_count:  The number of failed receive attempts after which send() stops
                                  listening. Defaults to 2.
            timeout_base_value: Backoff base in seconds; the n-th failed attempt is followed by a sleep
                                  of n * timeout_base_value. Defaults to 0.8.
            receive_timeout:    The time in seconds a single receive attempt waits. Defaults to 0.1.
            socket_factory:     Creates the socket used by each send() call.
            sleep:              The coroutine used for backoff sleeps.
            logger:             Receives this transport's log events. Defaults to the package logger.
        """
        self.port = port
        self.max_timeout_count = max_timeout_count
        self.timeout_base_value = timeout_base_value
        self.receive_timeout = receive_timeout
        self._socket_factory = socket_factory
        self._sleep = sleep
        self.logger = pkg_logger if logger is None else logger

    async def send(self, payload: bytes, ip_address: str) -> List[UdpResponse]:
        """Sends payload to ip_address and returns the replies received, in arrival order.

        Never raises for network errors; a socket that cannot be opened or a datagram that cannot
        be sent yields an empty list.
        """
        self.logger.debug(f"Using address {ip_address}")
        responses: List[UdpResponse] = []
        sock = self._socket_factory()
        try:
            await sock.open()
            sock.sendto(payload, (ip_address, self.port))
            responses = await self._receive_responses(sock)
        except OSError as e:
            self.logger.warning(f"Error sending message to {ip_address} or reading answer: {e}")
        finally:
            sock.close()
        return responses

    async def _receive_responses(self, sock: UdpSocketWrapper) -> List[UdpResponse]:
        responses: List[UdpResponse] = []
        timeout_count = 0
        while timeout_count < self.max_timeout_count:
            try:
                data, addr = await sock.receive(self.receive_timeout)
            except (asyncio.TimeoutError, OSError) as e:
                timeout_count += 1
                self.logger.info(f"Socket receive timeout no. {timeout_count}: {e!r}")
                await self._sleep(timeout_count * self.timeout_base_value)
                continue
            if addr is not None and len(data) > 0:
                responses.append(UdpResponse(data.decode('utf-8', errors='replace'), addr[0]))
        return responses
