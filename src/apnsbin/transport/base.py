"""Transport interface.

This is the (small) contract a transport implementation should follow. It
lives outside :mod:`apnsbin.protocol` so the codec stays free of sockets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all connection and transport errors."""


class InvalidCredentials(TransportError):
    """The certificate or private key could not be loaded."""


class InvalidAddress(TransportError):
    """The gateway address is not of the form ``host:port``."""


class TransportTimeout(TransportError):
    """A connection phase did not complete in time."""


class DialTimeout(TransportTimeout):
    """The TCP connection was not established in time."""


class HandshakeTimeout(TransportTimeout):
    """The TLS handshake did not complete in time."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class DialFailed(TransportConnectionError):
    """The TCP connection attempt failed."""


class HandshakeFailed(TransportConnectionError):
    """The TLS handshake failed."""


class SendFailed(TransportConnectionError):
    """A frame could not be written in full."""


class TransportClosed(TransportConnectionError):
    """The peer closed the connection, or it was closed locally."""


class SessionStateError(TransportError):
    """The session is in the wrong state for the requested operation."""


class NotConnected(SessionStateError):
    """The session is not connected."""


class AlreadyConnecting(SessionStateError):
    """Another thread is already connecting this session."""


class Transport(ABC):
    """Minimal contract for a two-phase (dial, then secure) byte stream."""

    @abstractmethod
    def dial(self) -> None:
        """Establish the underlying stream connection."""

    @abstractmethod
    def handshake(self) -> None:
        """Secure the dialed connection."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write all of *data*, or raise."""

    @abstractmethod
    def read(self, count: int) -> bytes:
        """Read exactly *count* bytes, or raise."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the connection. Must be idempotent and thread safe."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
