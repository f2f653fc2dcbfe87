# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Records produced by the UDP sender and the reply decoders.

Decoded records come in two variants, success and failure. A failure record is
built with the failed() classmethod of its class and always carries the
SERVICE_UNAVAILABLE (503) response code; callers test is_success rather than
comparing against a shared sentinel object.
"""

from __future__ import annotations

from revogi_smart_strip.internal_types import *
from .constants import (
    DISCOVERY_SUCCESS_CODE,
    SWITCH_SUCCESS_CODE,
    SERVICE_UNAVAILABLE,
  )

class UdpResponse:
    """A single raw datagram received in reply to a query or command."""

    answer: str
    """The decoded datagram payload"""

    ip_address: str
    """The IP address of the sender"""

    def __init__(self, answer: str, ip_address: str) -> None:
        self.answer = answer
        self.ip_address = ip_address

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UdpResponse):
            return NotImplemented
        return self.answer == other.answer and self.ip_address == other.ip_address

    def __str__(self) -> str:
        return f"UdpResponse(answer={self.answer!r}, ip_address={self.ip_address!r})"

    def __repr__(self) -> str:
        return str(self)

class DeviceInfo:
    """The device description a smart strip reports in its discovery reply.

    Only the serial number is required; it addresses the strip in later commands.
    All reported fields, known or not, are kept in raw_data.
    """

    raw_data: JsonableDict

    def __init__(self, raw_data: Mapping[str, Jsonable]) -> None:
        if not isinstance(raw_data.get('sn'), str):
            raise ValueError(f"DeviceInfo requires a string \"sn\" field: {dict(raw_data)}")
        self.raw_data = dict(raw_data)

    def _get_str(self, name: str) -> Optional[str]:
        result = self.raw_data.get(name)
        if not isinstance(result, str):
            return None
        return result

    @property
    def serial_number(self) -> str:
        """The "sn" field"""
        return cast(str, self.raw_data['sn'])

    @property
    def regid(self) -> Optional[str]:
        return self._get_str('regid')

    @property
    def sak(self) -> Optional[str]:
        return self._get_str('sak')

    @property
    def name(self) -> Optional[str]:
        return self._get_str('name')

    @property
    def mac(self) -> Optional[str]:
        return self._get_str('mac')

    @property
    def version(self) -> Optional[str]:
        """The "ver" field (firmware version)"""
        return self._get_str('ver')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceInfo):
            return NotImplemented
        return self.raw_data == other.raw_data

    def __str__(self) -> str:
        return f"DeviceInfo({self.raw_data})"

    def __repr__(self) -> str:
        return str(self)

class DiscoveryRawResponse:
    """A decoded discovery reply: {"response": <int>, "data": <device>}."""

    response: int
    """0 on success"""

    data: Optional[DeviceInfo]
    """The reporting device; None for failure records"""

    def __init__(self, response: int, data: Optional[DeviceInfo]=None) -> None:
        self.response = response
        self.data = data

    @classmethod
    def failed(cls) -> Self:
        return cls(SERVICE_UNAVAILABLE, None)

    @property
    def is_success(self) -> bool:
        return self.response == DISCOVERY_SUCCESS_CODE and self.data is not None

    def __str__(self) -> str:
        return f"DiscoveryRawResponse(response={self.response}, data={self.data})"

    def __repr__(self) -> str:
        return str(self)

class SwitchResponse:
    """A decoded switch command acknowledgement: {"responseValue": <int>, "code": <int>}."""

    response_value: int
    code: int
    """200 on success"""

    def __init__(self, response_value: int, code: int) -> None:
        self.response_value = response_value
        self.code = code

    @classmethod
    def failed(cls) -> Self:
        return cls(0, SERVICE_UNAVAILABLE)

    @property
    def is_success(self) -> bool:
        return self.code == SWITCH_SUCCESS_CODE

    def to_jsonable(self) -> JsonableDict:
        return { "responseValue": self.response_value, "code": self.code }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SwitchResponse):
            return NotImplemented
        return self.response_value == other.response_value and self.code == other.code

    def __str__(self) -> str:
        return f"SwitchResponse(response_value={self.response_value}, code={self.code})"

    def __repr__(self) -> str:
        return str(self)

class Status:
    """The per-port state a smart strip reports in reply to a status query."""

    online: bool
    response_code: int

    switch_value: List[int]
    """On (1) or off (0), one entry per port"""

    watt: List[float]
    """Power draw, one entry per port, in the units the device reports"""

    amp: List[float]
    """Current draw, one entry per port, in the units the device reports"""

    def __init__(
            self,
            online: bool,
            response_code: int,
            switch_value: Optional[Iterable[int]]=None,
            watt: Optional[Iterable[float]]=None,
            amp: Optional[Iterable[float]]=None,
          ) -> None:
        self.online = online
        self.response_code = response_code
        self.switch_value = [] if switch_value is None else list(switch_value)
        self.watt = [] if watt is None else list(watt)
        self.amp = [] if amp is None else list(amp)

    @classmethod
    def failed(cls) -> Self:
        return cls(False, SERVICE_UNAVAILABLE)

    @property
    def is_success(self) -> bool:
        return self.online and self.response_code == SWITCH_SUCCESS_CODE

    def to_jsonable(self) -> JsonableDict:
        return {
            "online": self.online,
            "code": self.response_code,
            "switch": list(self.switch_value),
            "watt": list(self.watt),
            "amp": list(self.amp),
          }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return self.to_jsonable() == other.to_jsonable()

    def __str__(self) -> str:
        return (f"Status(online={self.online}, response_code={self.response_code}, "
                f"switch_value={self.switch_value}, watt={self.watt}, amp={self.amp})")

    def __repr__(self) -> str:
        return str(self)
