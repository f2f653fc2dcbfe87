# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by this package"""

REVOGI_PORT = 8888
"""The UDP port on which Revogi smart strips listen for queries and commands."""

MAX_TIMEOUT_COUNT = 2
"""The number of failed receive attempts after which a receive loop gives up."""

TIMEOUT_BASE_VALUE = 0.8
"""Backoff base, in seconds. After the n-th failed receive attempt the sender
   sleeps n * TIMEOUT_BASE_VALUE seconds, i.e., 0.8s, then 1.6s."""

DEFAULT_RECEIVE_TIMEOUT = 0.1
"""The time (in seconds) a single receive attempt waits for a datagram."""

MAX_DATAGRAM_SIZE = 512
"""Replies longer than this many bytes are truncated."""

UDP_DISCOVERY_QUERY = "00sw=all,,,;"
"""The broadcast query that all smart strips answer with their device info."""

VERSION_STRING = "V3"
"""Protocol marker that prefixes commands and command replies."""

SWITCH_COMMAND = 20
"""The "cmd" value of a port on/off command."""

STATUS_COMMAND = 90
"""The "cmd" value of a status query."""

DISCOVERY_SUCCESS_CODE = 0
"""The "response" value of a successful discovery reply."""

SWITCH_SUCCESS_CODE = 200
"""The "code" value of a successful command reply."""

SERVICE_UNAVAILABLE = 503
"""Response code carried by failure records (undecodable or missing replies)."""
