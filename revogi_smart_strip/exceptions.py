#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

class RevogiError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class InvalidCommandArgument(RevogiError, ValueError):
  """Raised before any network I/O when a command is given an invalid serial number,
     port or state."""
  pass
