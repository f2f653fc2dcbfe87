# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
DiscoveryService -- finds the Revogi smart strips on the local networks.
"""

from __future__ import annotations

import logging

from revogi_smart_strip.internal_types import *
from .pkg_logging import logger as pkg_logger
from .broadcast import BroadcastDispatcher
from .codec import encode_discovery_query, decode_discovery_response
from .responses import DeviceInfo

class DiscoveryService:
    dispatcher: BroadcastDispatcher

    def __init__(self, dispatcher: Optional[BroadcastDispatcher]=None, logger: Optional[logging.Logger]=None) -> None:
        self.logger = pkg_logger if logger is None else logger
        self.dispatcher = BroadcastDispatcher(logger=self.logger) if dispatcher is None else dispatcher

    async def discover_smart_strips(self) -> List[DeviceInfo]:
        """Broadcasts the discovery query and returns the devices that answered successfully,
           in the order their replies were collected.

        A strip reachable through more than one broadcast address is reported once per address;
        no deduplication by serial number is done.
        """
        responses = await self.dispatcher.broadcast(encode_discovery_query())
        results: List[DeviceInfo] = []
        for response in responses:
            if len(response.answer) == 0:
                continue
            raw_response = decode_discovery_response(response.answer, log=self.logger)
            if raw_response.is_success:
                assert raw_response.data is not None
                results.append(raw_response.data)
        self.logger.debug(f"Discovered {len(results)} smart strip(s)")
        return results
