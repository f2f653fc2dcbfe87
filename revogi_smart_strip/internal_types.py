# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Type hints used internally by this package.
"""

from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    Type,
    Union,
    cast,
  )

from types import TracebackType
from typing_extensions import Self

Jsonable = Union[Dict[str, 'Jsonable'], List['Jsonable'], str, int, float, bool, None]
"""A type hint for a value that can be serialized to JSON."""

JsonableDict = Dict[str, Jsonable]
"""A type hint for a JSON object."""

HostAndPort = Tuple[str, int]
"""An IPv4 (host, port) socket address."""
