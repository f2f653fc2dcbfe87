# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Package revogi_smart_strip discovers and controls Revogi smart power strips on the local network.

Revogi strips speak a proprietary text protocol over UDP port 8888. A client broadcasts
the query "00sw=all,,,;" to every local broadcast address, and each strip answers with a JSON
description of itself, including the serial number that addresses it in later commands.
Ports are switched with a "V3"-prefixed JSON command, which is also broadcast; the strip that
owns the serial number answers with a "V3"-prefixed JSON acknowledgement.

UDP gives no delivery guarantee, so every exchange uses a short bounded receive window with
linear backoff, and every network or decode failure is converted into an empty result or a
failure record rather than an exception. Only invalid command arguments raise.
"""

from .version import __version__

from .internal_types import Jsonable, JsonableDict

from .exceptions import RevogiError, InvalidCommandArgument

from .responses import UdpResponse, DeviceInfo, DiscoveryRawResponse, SwitchResponse, Status
from .codec import (
    encode_discovery_query,
    encode_switch_command,
    encode_status_query,
    extract_v3_payload,
    decode_discovery_response,
    decode_switch_response,
    decode_status_response,
  )
from .udp_socket import UdpSocketWrapper, UdpTransport
from .broadcast import BroadcastDispatcher
from .discovery import DiscoveryService
from .switch import SwitchService
from .status import StatusService
from .util import get_local_broadcast_addresses
from .constants import REVOGI_PORT, MAX_TIMEOUT_COUNT, TIMEOUT_BASE_VALUE

__all__ = [
    '__version__',
    'Jsonable', 'JsonableDict',
    'RevogiError', 'InvalidCommandArgument',
    'UdpResponse', 'DeviceInfo', 'DiscoveryRawResponse', 'SwitchResponse', 'Status',
    'encode_discovery_query', 'encode_switch_command', 'encode_status_query', 'extract_v3_payload',
    'decode_discovery_response', 'decode_switch_response', 'decode_status_response',
    'UdpSocketWrapper', 'UdpTransport',
    'BroadcastDispatcher',
    'DiscoveryService',
    'SwitchService',
    'StatusService',
    'get_local_broadcast_addresses',
    'REVOGI_PORT', 'MAX_TIMEOUT_COUNT', 'TIMEOUT_BASE_VALUE',
]
