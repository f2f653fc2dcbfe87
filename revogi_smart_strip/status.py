# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
StatusService -- queries the per-port state of a single smart strip at a known IP address.
"""

from __future__ import annotations

import logging

from revogi_smart_strip.internal_types import *
from .pkg_logging import logger as pkg_logger
from .exceptions import InvalidCommandArgument
from .broadcast import BroadcastDispatcher
from .codec import encode_status_query, decode_status_response
from .responses import Status

class StatusService:
    dispatcher: BroadcastDispatcher

    def __init__(self, dispatcher: Optional[BroadcastDispatcher]=None, logger: Optional[logging.Logger]=None) -> None:
        self.logger = pkg_logger if logger is None else logger
        self.dispatcher = BroadcastDispatcher(logger=self.logger) if dispatcher is None else dispatcher

    async def get_status(self, serial_number: str, ip_address: str) -> Status:
        """Returns the status reported by the strip, or Status.failed() if it did not answer."""
        if not serial_number:
            self.logger.warning("Status requested without a serial number")
            raise InvalidCommandArgument("serial number must not be empty")
        responses = await self.dispatcher.send_to(encode_status_query(serial_number), ip_address)
        for response in responses:
            if len(response.answer) == 0:
                continue
            status = decode_status_response(response.answer, log=self.logger)
            if status.is_success:
                return status
        return Status.failed()
