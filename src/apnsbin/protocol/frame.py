""" Binary framing for the legacy notification protocol. A notification
    is submitted as a single frame::

        [command=2:1][length:4][item][item]...

    where the length counts every byte after itself, and each item is::

        [item id:1][item length:2][item body]

    The gateway never acknowledges a successful delivery; it only speaks up
    when something goes wrong, with a fixed six byte error response::

        [command=8:1][status:1][identifier:4]

    All multi-byte integers, in both directions, are big-endian.
"""

import binascii
import itertools
import struct
import threading

from . import fields
from . import status


class EncodingError(Exception):
    """ A notification could not be encoded as a frame. """


class MalformedToken(EncodingError, ValueError):
    """ The device token is not valid hex, or is not 32 bytes long. """


class EncodingInvariantViolation(EncodingError, RuntimeError):
    """ The encoder produced a frame whose size does not match the size it
        computed up front. This is a bug in the encoder, not a problem with
        the caller's input.
    """


payload_types = (bytes, bytearray, memoryview)

_header = struct.Struct('>BI')
_item_header = struct.Struct('>BH')
_error_response = struct.Struct('>BBi')


class ErrorEvent:
    """ The decoded content of an error response from the gateway. The
        *identifier* is the one the caller assigned to the notification that
        failed; the *status* is the raw numeric code, which may or may not
        appear in the :mod:`apnsbin.protocol.status` table.
    """

    __slots__ = ('status', 'identifier')

    def __init__(self, status, identifier):
        self.status = status
        self.identifier = identifier


    def __eq__(self, other):
        if not isinstance(other, ErrorEvent):
            return NotImplemented

        return self.status == other.status and self.identifier == other.identifier


    def __hash__(self):
        return hash((self.status, self.identifier))


    def __repr__(self):
        return 'ErrorEvent(%s, identifier=%d)' % (self.label, self.identifier)


    @property
    def label(self):
        return status.label(self.status)


    @property
    def terminal(self):
        return status.is_terminal(self.status)


# end of class ErrorEvent



class Notification:
    """ The item-by-item content of an outbound notification frame, as
        recovered by :func:`unpack`.
    """

    def __init__(self, identifier, token, payload, expiration, priority):
        self.identifier = identifier
        self.token = token
        self.payload = payload
        self.expiration = expiration
        self.priority = priority


    def __repr__(self):
        return 'Notification(identifier=%d, token=%s, payload=%d bytes)' % (
                self.identifier, self.token.hex(), len(self.payload))


# end of class Notification



def decode_token(token):
    """ Return the raw bytes for the hex-encoded device *token*. Raises
        :class:`MalformedToken` if the token is not valid hex, or does not
        decode to exactly 32 bytes.
    """

    try:
        raw = binascii.unhexlify(token)
    except (TypeError, ValueError) as e:
        raise MalformedToken('device token is not valid hex: ' + repr(token)) from e

    if len(raw) != fields.TOKEN_SIZE:
        raise MalformedToken('device token decodes to %d bytes, expected %d' % (len(raw), fields.TOKEN_SIZE))

    return raw


def _item(item_id, body):
    return _item_header.pack(item_id, len(body)) + body


def encode(identifier, expiration, token, payload, priority):
    """ Return the complete notification frame, as bytes. The *token* is
        the hex-encoded device token; the *payload* is the already-serialized
        notification content, and is silently truncated to 2048 bytes if it
        is any longer.
    """

    token = decode_token(token)

    if not isinstance(payload, payload_types):
        raise EncodingError('payload must be bytes, not ' + type(payload).__name__)

    payload = bytes(payload)
    if len(payload) > fields.PAYLOAD_LIMIT:
        payload = payload[:fields.PAYLOAD_LIMIT]

    try:
        identifier = struct.pack('>i', identifier)
        expiration = struct.pack('>I', expiration)
        priority = struct.pack('>B', priority)
    except struct.error as e:
        raise EncodingError('notification field out of range: ' + str(e)) from e

    items = (
        (fields.DEVICE_TOKEN, token),
        (fields.PAYLOAD, payload),
        (fields.IDENTIFIER, identifier),
        (fields.EXPIRATION, expiration),
        (fields.PRIORITY, priority),
    )

    length = 0
    for item_id, body in items:
        length += _item_header.size + len(body)

    total = _header.size + length

    frame = bytearray(_header.pack(fields.NOTIFICATION, length))
    for item_id, body in items:
        frame += _item(item_id, body)

    if len(frame) != total:
        raise EncodingInvariantViolation('encoded %d bytes, expected %d' % (len(frame), total))

    return bytes(frame)


def decode(buffer):
    """ Interpret a six byte error response from the gateway, returning an
        :class:`ErrorEvent`. Anything that is not exactly six bytes, or does
        not begin with the error-response command, returns None.
    """

    if buffer is None or len(buffer) != fields.ERROR_RESPONSE_SIZE:
        return None

    command, code, identifier = _error_response.unpack(bytes(buffer))

    if command != fields.ERROR_RESPONSE:
        return None

    return ErrorEvent(code, identifier)


def unpack(frame):
    """ Break an encoded notification *frame* back into its items, returning
        a :class:`Notification`. Raises ValueError if the frame is not a
        well-formed notification.
    """

    frame = bytes(frame)

    if len(frame) < _header.size:
        raise ValueError('frame too short: %d bytes' % (len(frame)))

    command, length = _header.unpack_from(frame)

    if command != fields.NOTIFICATION:
        raise ValueError('not a notification frame, command is %d' % (command))

    if length != len(frame) - _header.size:
        raise ValueError('frame length field is %d, frame carries %d bytes' % (length, len(frame) - _header.size))

    items = dict()
    offset = _header.size

    while offset < len(frame):
        if offset + _item_header.size > len(frame):
            raise ValueError('truncated item header at offset %d' % (offset))

        item_id, item_length = _item_header.unpack_from(frame, offset)
        offset += _item_header.size

        body = frame[offset:offset + item_length]
        if len(body) != item_length:
            raise ValueError('truncated item %d at offset %d' % (item_id, offset))

        items[item_id] = body
        offset += item_length

    try:
        token = items[fields.DEVICE_TOKEN]
        payload = items[fields.PAYLOAD]
        identifier = items[fields.IDENTIFIER]
        expiration = items[fields.EXPIRATION]
        priority = items[fields.PRIORITY]
    except KeyError as e:
        raise ValueError('notification frame is missing item %d' % (e.args[0]))

    try:
        identifier, = struct.unpack('>i', identifier)
        expiration, = struct.unpack('>I', expiration)
        priority, = struct.unpack('>B', priority)
    except struct.error as e:
        raise ValueError('malformed notification item: ' + str(e)) from e

    return Notification(identifier, token, payload, expiration, priority)


_id_min = 0
_id_max = 0x7FFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def next_identifier():
    """ Return the next notification identifier. Identifiers are locally
        unique, increasing, and wrap back to zero once they exhaust the
        positive signed 32-bit range.
    """

    global _id_ticker

    with _id_lock:
        id = next(_id_ticker)

        if id > _id_max:
            _id_ticker = itertools.count(_id_min)
            id = next(_id_ticker)

    return id


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
