from . import fields
from . import status
from . import frame
from . import payload

from .frame import decode, encode, unpack, next_identifier
from .frame import ErrorEvent, Notification
from .frame import EncodingError, EncodingInvariantViolation, MalformedToken
from .payload import Alert, Payload


"""
apnsbin Protocol Layer
======================

Everything that describes what goes over the wire, with no knowledge of
sockets, TLS, or threads.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Session (apnsbin.session)
    Connection state machine, send, background receive loop

    │
    ▼
Payload (payload.py)
    JSON shaping of the fixed ``aps`` dictionary

    │
    ▼
Frame Codec (frame.py)
    Notification frame encoding, error response decoding

    │
    ▼
Status Taxonomy (status.py)
    Read-only table of gateway status codes

    │
    ▼
Field Vocabulary (fields.py)
    Command tags, item ids, size limits

---------------------------------------------------------------------

Below the Protocol Layer
------------------------

Transport (apnsbin.transport)
    TCP dial, TLS handshake, exact reads and writes

---------------------------------------------------------------------

Design Principles
-----------------

1. Pure
   The codec is stateless; identical input yields identical frames.

2. Layer Isolation
   Dependencies only flow downward:
       Session -> Protocol
       Session -> Transport
   The protocol never imports the transport.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
