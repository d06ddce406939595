"""TLS-over-TCP transport to the notification gateway."""

from __future__ import annotations

import logging
import os
import socket
import ssl
import tempfile
import threading
from typing import Optional, Tuple, Union

from .base import InvalidAddress, InvalidCredentials, Transport, TransportClosed


logger = logging.getLogger(__name__)

Pem = Union[str, bytes]


def split_address(address: str) -> Tuple[str, int]:
    """Return (host, port) for a ``host:port`` *address*."""

    if not isinstance(address, str):
        raise InvalidAddress(f"gateway address must be a string, not {address!r}")

    parts = address.split(":")
    if len(parts) != 2:
        raise InvalidAddress(f"gateway address must be host:port, not {address!r}")

    host, port = parts
    if not host:
        raise InvalidAddress(f"gateway address has no host: {address!r}")

    try:
        port = int(port)
    except ValueError:
        raise InvalidAddress(f"gateway port is not a number: {address!r}") from None

    if port < 1 or port > 65535:
        raise InvalidAddress(f"gateway port out of range: {address!r}")

    return host, port


def _as_bytes(block: Pem) -> bytes:
    if isinstance(block, str):
        return block.encode()
    return bytes(block)


def create_context(
    certificate_file: Optional[str] = None,
    key_file: Optional[str] = None,
    certificate: Optional[Pem] = None,
    key: Optional[Pem] = None,
) -> ssl.SSLContext:
    """Build a client TLS context carrying the provider certificate.

    The PEM *certificate* and *key* blocks take precedence when both are
    given; otherwise the certificate and key are loaded from the named files.
    """

    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)

    try:
        if certificate and key:
            _load_blocks(context, certificate, key)
        elif certificate_file and key_file:
            context.load_cert_chain(certificate_file, key_file)
        else:
            raise InvalidCredentials("no certificate and key supplied")
    except (OSError, ssl.SSLError, ValueError) as exc:
        raise InvalidCredentials(f"cannot load certificate and key: {exc}") from exc

    return context


def _load_blocks(context: ssl.SSLContext, certificate: Pem, key: Pem) -> None:
    # ssl only loads certificate chains from the filesystem.
    with tempfile.TemporaryDirectory(prefix="apnsbin-") as scratch:
        certificate_file = os.path.join(scratch, "certificate.pem")
        key_file = os.path.join(scratch, "key.pem")

        for filename, block in ((certificate_file, certificate), (key_file, key)):
            descriptor = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(descriptor, "wb") as handle:
                handle.write(_as_bytes(block))

        context.load_cert_chain(certificate_file, key_file)


class TlsTransport(Transport):
    """A TCP connection to the gateway, upgraded to TLS.

    :meth:`dial` and :meth:`handshake` block without a timeout of their own;
    the caller is expected to race them against a timer, and to call
    :meth:`close` if it gives up. A dial or handshake that completes after
    :meth:`close` releases whatever it produced.
    """

    def __init__(self, host: str, port: int, context: ssl.SSLContext):
        self.host = host
        self.port = int(port)
        self.context = context

        self._lock = threading.Lock()
        self._closed = False
        self._socket: Optional[socket.socket] = None

    def dial(self) -> None:
        raw = socket.create_connection((self.host, self.port))

        with self._lock:
            if self._closed:
                raw.close()
                raise TransportClosed(f"{self.host}:{self.port}: closed while dialing")
            self._socket = raw

        logger.debug("dialed %s:%d", self.host, self.port)

    def handshake(self) -> None:
        with self._lock:
            raw = self._socket
        if raw is None:
            raise TransportClosed(f"{self.host}:{self.port}: not dialed")

        secure = self.context.wrap_socket(
            raw, server_hostname=self.host, do_handshake_on_connect=False
        )

        with self._lock:
            if self._closed:
                secure.close()
                raise TransportClosed(f"{self.host}:{self.port}: closed during handshake")
            self._socket = secure

        secure.do_handshake()
        logger.debug("TLS handshake with %s:%d complete, %s", self.host, self.port, secure.version())

    def write(self, data: bytes) -> None:
        sock = self._socket
        if sock is None:
            raise TransportClosed(f"{self.host}:{self.port}: not connected")
        sock.sendall(data)

    def read(self, count: int) -> bytes:
        sock = self._socket
        if sock is None:
            raise TransportClosed(f"{self.host}:{self.port}: not connected")

        data = b""
        while len(data) < count:
            chunk = sock.recv(count - len(data))
            if not chunk:
                raise TransportClosed(f"{self.host}:{self.port}: connection closed by peer")
            data += chunk
        return data

    def close(self) -> None:
        with self._lock:
            self._closed = True
            sock = self._socket
            self._socket = None

        if sock is None:
            return

        # shutdown() wakes any thread blocked in recv(); close() alone does not.
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()

    @property
    def is_open(self) -> bool:
        return self._socket is not None
