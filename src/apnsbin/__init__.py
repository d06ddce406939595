""" Python client for the legacy binary push-notification protocol. This
    includes the frame codec, for encoding notifications and decoding the
    gateway's error responses, and the session, which maintains the TLS
    connection and surfaces error responses as they arrive.
"""

# Utility components.

from . import json
from . import config

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from . import session
from .session import Session, InvalidArgument
from .session import CONNECTED, CONNECTING, DISCONNECTED

from .protocol import Alert, Payload, ErrorEvent
from .protocol import decode, encode, next_identifier

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
