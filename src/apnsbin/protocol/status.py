""" Status codes reported by the gateway in error-response frames. The
    table is fixed by the gateway; it is exposed as a read-only mapping
    so that no caller can alter it at runtime.
"""

import types


NO_ERRORS = 0
PROCESSING_ERROR = 1
MISSING_DEVICE_TOKEN = 2
MISSING_TOPIC = 3
MISSING_PAYLOAD = 4
INVALID_TOKEN_SIZE = 5
INVALID_TOPIC_SIZE = 6
INVALID_PAYLOAD_SIZE = 7
INVALID_TOKEN = 8
SHUTDOWN = 10
UNKNOWN = 255

unrecognized = 'UNRECOGNIZED'

labels = types.MappingProxyType({
    NO_ERRORS:              'NO_ERRORS',
    PROCESSING_ERROR:       'PROCESSING_ERROR',
    MISSING_DEVICE_TOKEN:   'MISSING_DEVICE_TOKEN',
    MISSING_TOPIC:          'MISSING_TOPIC',
    MISSING_PAYLOAD:        'MISSING_PAYLOAD',
    INVALID_TOKEN_SIZE:     'INVALID_TOKEN_SIZE',
    INVALID_TOPIC_SIZE:     'INVALID_TOPIC_SIZE',
    INVALID_PAYLOAD_SIZE:   'INVALID_PAYLOAD_SIZE',
    INVALID_TOKEN:          'INVALID_TOKEN',
    SHUTDOWN:               'SHUTDOWN',
    UNKNOWN:                'UNKNOWN',
})


def label(code):
    """ Return the name for the numeric status *code*, or 'UNRECOGNIZED'
        if the gateway sent something outside the documented table.
    """

    try:
        return labels[code]
    except KeyError:
        return unrecognized


def is_terminal(code):
    """ Return True if *code* means the gateway is closing the connection.
    """

    return code == SHUTDOWN


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
