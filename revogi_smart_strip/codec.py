# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Encoding of the textual queries/commands sent to Revogi smart strips, and decoding of their replies.

Queries and commands:

    00sw=all,,,;                                                 (discovery, broadcast)
    V3{"sn":"<serial>", "cmd": 20, "port": <int>, "state": <0|1>}  (switch a port)
    V3{"sn":"<serial>", "cmd": 90}                                 (status, unicast)

Discovery replies are bare JSON objects. Command replies carry the "V3" marker, possibly preceded
by other bytes, in front of the JSON object; see extract_v3_payload().

The decoders never raise. A reply that cannot be decoded yields a failure record and a warning
is logged.
"""

from __future__ import annotations

import json
import logging

from revogi_smart_strip.internal_types import *
from .pkg_logging import logger as pkg_logger
from .constants import (
    UDP_DISCOVERY_QUERY,
    VERSION_STRING,
    SWITCH_COMMAND,
    STATUS_COMMAND,
    DISCOVERY_SUCCESS_CODE,
    SWITCH_SUCCESS_CODE,
  )
from .responses import DeviceInfo, DiscoveryRawResponse, SwitchResponse, Status

def _is_int(value: Any) -> bool:
    # JSON true/false decode to bool, which is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)

def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)

def encode_discovery_query() -> str:
    return UDP_DISCOVERY_QUERY

def encode_switch_command(serial_number: str, port: int, state: int) -> str:
    """Builds the command that switches one port of the strip with the given serial number.

    Arguments are not validated here; see SwitchService.switch_port().
    """
    return f'{VERSION_STRING}{{"sn":{json.dumps(serial_number, ensure_ascii=False)}, "cmd": {SWITCH_COMMAND}, "port": {port}, "state": {state}}}'

def encode_status_query(serial_number: str) -> str:
    return f'{VERSION_STRING}{{"sn":{json.dumps(serial_number, ensure_ascii=False)}, "cmd": {STATUS_COMMAND}}}'

def extract_v3_payload(text: str) -> Optional[str]:
    """Returns the text that follows the last "V3" marker in a command reply, or None if
       there is no marker.

    Replies may carry arbitrary bytes ahead of the marker, and those bytes may themselves
    contain "V3", so the last occurrence is the one that frames the JSON payload.
    """
    i = text.rfind(VERSION_STRING)
    if i < 0:
        return None
    return text[i + len(VERSION_STRING):]

def _loads_object(text: str) -> Optional[JsonableDict]:
    try:
        result = json.loads(text)
    except (ValueError, RecursionError):
        return None
    if not isinstance(result, dict):
        return None
    return result

def decode_discovery_response(text: str, log: Optional[logging.Logger]=None) -> DiscoveryRawResponse:
    """Decodes a discovery reply of the form {"response": 0, "data": {"sn": ..., ...}}.

    Returns DiscoveryRawResponse.failed() if the reply is not valid JSON, has no integer
    "response", or claims success without a device object carrying a string "sn".
    A well-formed reply with a nonzero "response" is returned as-is, without a device.
    """
    log = pkg_logger if log is None else log
    obj = _loads_object(text)
    if obj is not None:
        response = obj.get('response')
        if _is_int(response):
            assert isinstance(response, int)
            if response != DISCOVERY_SUCCESS_CODE:
                return DiscoveryRawResponse(response, None)
            data = obj.get('data')
            if isinstance(data, dict) and isinstance(data.get('sn'), str):
                return DiscoveryRawResponse(response, DeviceInfo(data))
    log.warning(f"Could not parse string {text!r} to DiscoveryRawResponse")
    return DiscoveryRawResponse.failed()

def decode_switch_response(text: str, log: Optional[logging.Logger]=None) -> SwitchResponse:
    """Decodes a switch acknowledgement of the form <junk>V3{"responseValue": <int>, "code": <int>}.

    Returns SwitchResponse.failed() if there is no "V3" marker, the text after the last marker
    is not a JSON object, or it has no integer "code". A missing "responseValue" decodes as 0.
    """
    log = pkg_logger if log is None else log
    payload = extract_v3_payload(text)
    obj = None if payload is None else _loads_object(payload)
    if obj is not None:
        code = obj.get('code')
        response_value = obj.get('responseValue', 0)
        if _is_int(code) and _is_int(response_value):
            assert isinstance(code, int) and isinstance(response_value, int)
            return SwitchResponse(response_value, code)
    log.warning(f"Could not parse string {text!r} to SwitchResponse")
    return SwitchResponse.failed()

def decode_status_response(text: str, log: Optional[logging.Logger]=None) -> Status:
    """Decodes a status reply of the form
       <junk>V3{"response": 90, "code": 200, "data": {"switch": [..], "watt": [..], "amp": [..]}}.

    A reply with a non-200 code decodes to an offline Status carrying that code. Returns
    Status.failed() if the reply cannot be decoded.
    """
    log = pkg_logger if log is None else log
    payload = extract_v3_payload(text)
    obj = None if payload is None else _loads_object(payload)
    if obj is not None:
        code = obj.get('code')
        if _is_int(code):
            assert isinstance(code, int)
            if code != SWITCH_SUCCESS_CODE:
                return Status(False, code)
            data = obj.get('data')
            if isinstance(data, dict):
                switch_value = data.get('switch', [])
                watt = data.get('watt', [])
                amp = data.get('amp', [])
                if (isinstance(switch_value, list) and all(_is_int(x) for x in switch_value) and
                        isinstance(watt, list) and all(_is_number(x) for x in watt) and
                        isinstance(amp, list) and all(_is_number(x) for x in amp)):
                    return Status(
                        True,
                        code,
                        cast(List[int], switch_value),
                        cast(List[float], watt),
                        cast(List[float], amp),
                      )
    log.warning(f"Could not parse string {text!r} to Status")
    return Status.failed()
