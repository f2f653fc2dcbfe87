# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SwitchService -- turns individual ports of a smart strip on or off.
"""

from __future__ import annotations

import logging

from revogi_smart_strip.internal_types import *
from .pkg_logging import logger as pkg_logger
from .exceptions import InvalidCommandArgument
from .broadcast import BroadcastDispatcher
from .codec import encode_switch_command, decode_switch_response
from .responses import SwitchResponse

class SwitchService:
    dispatcher: BroadcastDispatcher

    def __init__(self, dispatcher: Optional[BroadcastDispatcher]=None, logger: Optional[logging.Logger]=None) -> None:
        self.logger = pkg_logger if logger is None else logger
        self.dispatcher = BroadcastDispatcher(logger=self.logger) if dispatcher is None else dispatcher

    async def switch_port(self, serial_number: str, port: int, state: int) -> SwitchResponse:
        """Broadcasts a switch command for one port of the strip with the given serial number.

        Parameters:
            serial_number: The "sn" reported by the strip at discovery.
            port:          The port number (>= 0).
            state:         1 to turn the port on, 0 to turn it off.

        Returns the first successful (code 200) acknowledgement, or SwitchResponse.failed() if
        no strip acknowledged the command.

        Raises InvalidCommandArgument, before anything is sent, if state is not 0 or 1 or port
        is negative.
        """
        if isinstance(state, bool) or not isinstance(state, int) or state not in (0, 1):
            self.logger.warning(f"state value is not valid: {state}")
            raise InvalidCommandArgument(f"state has to be 0 or 1, got {state!r}")
        if isinstance(port, bool) or not isinstance(port, int) or port < 0:
            self.logger.warning(f"port doesn't exist on device: {port}")
            raise InvalidCommandArgument(f"Given port doesn't exist: {port!r}")

        responses = await self.dispatcher.broadcast(encode_switch_command(serial_number, port, state))
        for response in responses:
            if len(response.answer) == 0:
                continue
            switch_response = decode_switch_response(response.answer, log=self.logger)
            if switch_response.is_success:
                return switch_response
        return SwitchResponse.failed()
