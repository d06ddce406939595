""" Default settings for gateway connections. Each value can be supplied
    explicitly, set via an environment variable, or left at its built-in
    default. Environment variables are read once, the first time a value is
    requested; later changes to the environment are ignored.
"""

import os


production_gateway = 'gateway.push.apple.com:2195'
sandbox_gateway = 'gateway.sandbox.push.apple.com:2195'

default_timeout = 20

_timeout_variables = {
    'dial': 'APNSBIN_DIAL_TIMEOUT',
    'handshake': 'APNSBIN_HANDSHAKE_TIMEOUT',
}


def gateway(sandbox=False, default=None):
    """ Return the ``host:port`` address of the gateway to connect to. An
        explicit *default* always wins; otherwise the ``APNSBIN_GATEWAY``
        environment variable is used if it is set, falling back to the
        production or *sandbox* gateway.
    """

    if default is not None:
        return str(default)

    found = gateway.found

    if found is None:
        found = os.environ.get('APNSBIN_GATEWAY', '')
        gateway.found = found

    if found:
        return found

    if sandbox:
        return sandbox_gateway
    else:
        return production_gateway

gateway.found = None



def timeout(phase, default=None):
    """ Return the timeout, in seconds, for the connection *phase*, which is
        one of 'dial' or 'handshake'. The ``APNSBIN_DIAL_TIMEOUT`` and
        ``APNSBIN_HANDSHAKE_TIMEOUT`` environment variables override the
        built-in default of 20 seconds.
    """

    try:
        variable = _timeout_variables[phase]
    except KeyError:
        raise ValueError('unknown connection phase: ' + repr(phase))

    if default is not None:
        return _positive(default, phase)

    try:
        found = timeout.found[phase]
    except KeyError:
        pass
    else:
        return found

    try:
        found = os.environ[variable]
    except KeyError:
        found = default_timeout
    else:
        found = _positive(found, variable)

    timeout.found[phase] = found
    return found

timeout.found = dict()



def _positive(value, name):

    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValueError('%s must be a number, not %r' % (name, value))

    if value <= 0:
        raise ValueError('%s must be positive, not %r' % (name, value))

    return value


def reset():
    """ Forget any cached environment lookups.
    """

    gateway.found = None
    timeout.found = dict()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
