""" A :class:`Session` owns one persistent connection to the notification
    gateway. Notifications go out via :func:`Session.send`; the gateway only
    ever writes back to report a failed notification, and those reports are
    decoded by a background thread and handed to a caller-supplied channel,
    typically a :class:`queue.Queue`.

    A typical exchange::

        errors = queue.Queue(maxsize=1)
        session = apnsbin.Session(certificate_file='cert.pem',
                                  key_file='key.pem', channel=errors)
        session.connect()
        session.send(None, apnsbin.Payload('Hello'), token)
        event = errors.get()

    Nothing here retries; a closed session can be connected again by calling
    :func:`Session.connect`.
"""

import concurrent.futures
import logging
import threading

from . import config
from .protocol import fields
from .protocol import frame
from .protocol.payload import Payload
from .transport import tls
from .transport.base import (
    AlreadyConnecting,
    DialFailed,
    DialTimeout,
    HandshakeFailed,
    HandshakeTimeout,
    NotConnected,
    SendFailed,
    TransportError,
)


logger = logging.getLogger(__name__)

DISCONNECTED = 'disconnected'
CONNECTING = 'connecting'
CONNECTED = 'connected'


class InvalidArgument(ValueError):
    """ A notification was rejected before anything was written. """



class Session:
    """ A connection to the gateway at *gateway*, a ``host:port`` string;
        if no gateway is specified the default from :mod:`apnsbin.config`
        is used, which in turn depends on *sandbox*.

        The provider credentials are either the *certificate_file* and
        *key_file* paths, or the PEM-encoded *certificate* and *key* blocks;
        the blocks take precedence if both are provided.

        Decoded :class:`apnsbin.protocol.ErrorEvent` instances are handed to
        *channel* via its blocking ``put()`` method. If *channel* is None
        the inbound direction is never read.

        :ivar dial_timeout: Seconds allowed to establish the TCP connection.
        :ivar handshake_timeout: Seconds allowed for the TLS handshake.
    """

    transport_class = tls.TlsTransport

    def __init__(self, gateway=None, certificate_file=None, key_file=None,
                 channel=None, certificate=None, key=None, sandbox=False):

        self.gateway = config.gateway(sandbox, gateway)
        self.certificate_file = certificate_file
        self.key_file = key_file
        self.certificate = certificate
        self.key = key
        self.channel = channel

        self.dial_timeout = config.timeout('dial')
        self.handshake_timeout = config.timeout('handshake')

        self._lock = threading.Lock()
        self._state = DISCONNECTED
        self._transport = None

        self._closed = threading.Event()
        self._closed.set()


    def __enter__(self):
        self.connect()
        return self


    def __exit__(self, *exc_info):
        self.close()


    def __repr__(self):
        return '<Session %s %s>' % (self.gateway, self._state)


    @property
    def state(self):
        return self._state


    @property
    def transport(self):
        return self._transport


    def connect(self):
        """ Establish the connection: load the credentials, dial the gateway,
            and perform the TLS handshake. Blocks until connected, or until
            either phase fails or times out, in which case the appropriate
            :class:`apnsbin.transport.TransportError` subclass is raised and
            the session remains disconnected.

            Calling :func:`connect` on a connected session does nothing;
            calling it while another thread is connecting raises
            :class:`apnsbin.transport.AlreadyConnecting`.
        """

        with self._lock:
            if self._state == CONNECTED:
                return
            if self._state == CONNECTING:
                raise AlreadyConnecting('already connecting to ' + self.gateway)
            self._state = CONNECTING

        transport = None

        try:
            context = self._context()
            host, port = tls.split_address(self.gateway)

            transport = self.transport_class(host, port, context)
            with self._lock:
                self._transport = transport

            self._race(transport, transport.dial, self.dial_timeout, DialTimeout, DialFailed)
            self._race(transport, transport.handshake, self.handshake_timeout, HandshakeTimeout, HandshakeFailed)

            with self._lock:
                if self._transport is not transport:
                    raise HandshakeFailed('session closed while connecting to ' + self.gateway)
                self._state = CONNECTED
                self._closed.clear()

        except BaseException:
            with self._lock:
                if self._transport is transport:
                    self._transport = None
                self._state = DISCONNECTED

            if transport is not None:
                transport.close()
            raise

        logger.info('connected to %s', self.gateway)

        if self.channel is not None:
            thread = threading.Thread(target=self._receive, args=(transport,))
            thread.name = 'apnsbin.Session.receive %s' % (self.gateway)
            thread.daemon = True
            thread.start()


    def _context(self):
        return tls.create_context(self.certificate_file, self.key_file, self.certificate, self.key)


    def _race(self, transport, phase, timeout, timeout_class, failure_class):
        """ Run *phase* in its own thread and wait up to *timeout* seconds for
            it to finish. If the deadline passes first the *transport* is
            closed, which causes a late *phase* to discard its result.
        """

        future = concurrent.futures.Future()

        def run():
            if not future.set_running_or_notify_cancel():
                return
            try:
                phase()
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result(None)

        thread = threading.Thread(target=run)
        thread.daemon = True
        thread.start()

        done, _pending = concurrent.futures.wait((future,), timeout)

        if not done:
            transport.close()
            raise timeout_class('%s: no response in %.1f sec' % (self.gateway, timeout))

        error = future.exception()
        if error is not None:
            raise failure_class('%s: %s' % (self.gateway, error)) from error


    def send(self, identifier, payload, token, expiration=0):
        """ Submit one notification. The *payload* is a
            :class:`apnsbin.protocol.Payload` or the already-encoded JSON
            bytes; the *token* is the hex-encoded device token. If
            *identifier* is None the next value from
            :func:`apnsbin.protocol.next_identifier` is used. The identifier
            is returned so that later :class:`ErrorEvent` reports can be
            matched up.

            A failed write raises :class:`apnsbin.transport.SendFailed` but
            does not close the session; the receive thread notices a broken
            connection on its own.
        """

        if payload is None:
            raise InvalidArgument('a payload is required')

        if not isinstance(payload, (Payload,) + frame.payload_types):
            raise InvalidArgument('payload must be a Payload or bytes, not ' + type(payload).__name__)

        try:
            frame.decode_token(token)
        except frame.MalformedToken as e:
            raise InvalidArgument(str(e)) from e

        transport = self._transport
        if self._state != CONNECTED or transport is None:
            raise NotConnected('not connected to ' + self.gateway)

        if isinstance(payload, Payload):
            payload = payload.encapsulate()

        if identifier is None:
            identifier = frame.next_identifier()

        try:
            encoded = frame.encode(identifier, expiration, token, payload, fields.DEFAULT_PRIORITY)
        except frame.EncodingInvariantViolation:
            raise
        except frame.EncodingError as e:
            raise InvalidArgument(str(e)) from e

        try:
            transport.write(encoded)
        except (OSError, TransportError) as e:
            raise SendFailed('%s: write failed: %s' % (self.gateway, e)) from e

        logger.debug('sent notification %d, %d bytes', identifier, len(encoded))
        return identifier


    def _receive(self, transport):
        """ Background thread: read error responses until the connection
            breaks or the gateway announces it is shutting down.
        """

        while True:
            try:
                chunk = transport.read(fields.ERROR_RESPONSE_SIZE)
            except (OSError, TransportError) as e:
                if self._transport is transport:
                    logger.warning('read from %s failed: %s', self.gateway, e)
                break

            event = frame.decode(chunk)

            if event is None:
                logger.warning('unrecognized frame from %s: %s', self.gateway, chunk.hex())
                break

            logger.debug('received %r', event)

            if event.terminal:
                logger.info('gateway %s is shutting down', self.gateway)
                break

            self.channel.put(event)

        self._release(transport)


    def close(self):
        """ Close the connection. This is safe to call at any time, from any
            thread, any number of times.
        """

        with self._lock:
            transport = self._transport

        if transport is not None:
            self._release(transport)


    def _release(self, transport):
        """ Close *transport*, and if it is still the current one, mark the
            session as disconnected.
        """

        released = False

        with self._lock:
            if self._transport is transport:
                self._transport = None
                if self._state == CONNECTED:
                    self._state = DISCONNECTED
                    released = True

        transport.close()

        if released:
            logger.info('disconnected from %s', self.gateway)
            self._closed.set()


    def wait_closed(self, timeout=None):
        """ Block until the session is disconnected. Returns True if it is,
            or False if *timeout* seconds pass first.
        """

        return self._closed.wait(timeout)


# end of class Session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
