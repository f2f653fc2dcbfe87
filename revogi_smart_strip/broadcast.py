#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
BroadcastDispatcher -- sends a textual query to every local broadcast address (or to one
address) through a UdpTransport and merges the replies.
"""

from __future__ import annotations

import asyncio
import logging
import socket

from revogi_smart_strip.internal_types import *
from .pkg_logging import logger as pkg_logger
from .responses import UdpResponse
from .udp_socket import UdpTransport
from .util import get_local_broadcast_addresses

BroadcastAddressSource = Union[Iterable[str], Callable[[], Iterable[str]]]

class BroadcastDispatcher:
    transport: UdpTransport

    def __init__(
            self,
            transport: Optional[UdpTransport]=None,
            broadcast_addresses: Optional[BroadcastAddressSource]=None,
            logger: Optional[logging.Logger]=None,
          ) -> None:
        """Create a BroadcastDispatcher.

        Parameters:
            transport:           The UdpTransport used for each destination. Defaults to a UdpTransport
                                   with default settings.
            broadcast_addresses: The addresses broadcast() sends to; either a list of addresses or a
                                   callable returning one. Defaults to the broadcast addresses of all
                                   local IPv4 interfaces, enumerated on each broadcast().
            logger:              Receives this dispatcher's log events. Defaults to the package logger.
        """
        self.logger = pkg_logger if logger is None else logger
        self.transport = UdpTransport(logger=self.logger) if transport is None else transport
        if broadcast_addresses is None:
            broadcast_addresses = get_local_broadcast_addresses
        if callable(broadcast_addresses):
            self._broadcast_address_provider = broadcast_addresses
        else:
            fixed_addresses = list(broadcast_addresses)
            self._broadcast_address_provider = lambda: fixed_addresses

    def get_broadcast_addresses(self) -> List[str]:
        return list(self._broadcast_address_provider())

    async def broadcast(self, content: str) -> List[UdpResponse]:
        """Sends content to every broadcast address and returns all replies.

        The destinations are served concurrently; replies are grouped by destination in
        the order the addresses were enumerated, and in arrival order within a destination.
        A destination that fails contributes no replies and does not affect the others.
        """
        addresses = self.get_broadcast_addresses()
        self.logger.debug(f"Broadcasting {content!r} to {addresses}")
        results = await asyncio.gather(*[ self.send_to(content, address) for address in addresses ])
        return [ response for responses in results for response in responses ]

    async def send_to(self, content: str, ip_address: str) -> List[UdpResponse]:
        """Sends content to a single address and returns the replies.

        Returns an empty list if the address cannot be resolved.
        """
        loop = asyncio.get_running_loop()
        try:
            addrinfos = await loop.getaddrinfo(
                ip_address,
                self.transport.port,
                family=socket.AF_INET,
                type=socket.SOCK_DGRAM
              )
        except (OSError, UnicodeError) as e:
            self.logger.warning(f"Could not find host with IP {ip_address}: {e}")
            return []
        resolved_address = addrinfos[0][4][0]
        responses = await self.transport.send(content.encode('utf-8'), resolved_address)
        for response in responses:
            self.logger.info(f"Received: {response}")
        return responses
