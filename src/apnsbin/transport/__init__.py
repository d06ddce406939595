"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    TransportClosed,
    InvalidCredentials,
    InvalidAddress,
    DialTimeout,
    DialFailed,
    HandshakeTimeout,
    HandshakeFailed,
    SendFailed,
    SessionStateError,
    NotConnected,
    AlreadyConnecting,
)

from . import tls
from .tls import TlsTransport, create_context, split_address
