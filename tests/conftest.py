import socket
import time

import pytest

import apnsbin


token = 'ab' * 32
gateway = 'gateway.test:2195'


class PairTransport(apnsbin.transport.Transport):
    """ Stand-in for the TLS transport: one end of a socketpair, with the
        other end available to the test as *peer*. The class attributes
        control how the connection phases behave.
    """

    dial_delay = 0
    handshake_delay = 0
    dial_error = None
    handshake_error = None

    def __init__(self, host, port, context):
        self.host = host
        self.port = port
        self.local, self.peer = socket.socketpair()
        self.dialed = False
        self.secured = False
        self.closed = False


    def dial(self):
        time.sleep(self.dial_delay)
        if self.dial_error is not None:
            raise self.dial_error
        self.dialed = True


    def handshake(self):
        time.sleep(self.handshake_delay)
        if self.handshake_error is not None:
            raise self.handshake_error
        self.secured = True


    def write(self, data):
        if self.closed:
            raise apnsbin.transport.TransportClosed('closed')
        self.local.sendall(data)


    def read(self, count):
        data = b''
        while len(data) < count:
            chunk = self.local.recv(count - len(data))
            if not chunk:
                raise apnsbin.transport.TransportClosed('closed by peer')
            data += chunk
        return data


    def close(self):
        if self.closed:
            return
        self.closed = True
        try:
            self.local.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.local.close()


    @property
    def is_open(self):
        return not self.closed


class PairSession(apnsbin.Session):

    transport_class = PairTransport

    def _context(self):
        return None


def read_frame(peer):
    """ Read one complete notification frame from the *peer* socket.
    """

    header = b''
    while len(header) < 5:
        header += peer.recv(5 - len(header))

    length = int.from_bytes(header[1:5], 'big')

    body = b''
    while len(body) < length:
        body += peer.recv(length - len(body))

    return header + body


def error_frame(code, identifier):
    return bytes((8, code)) + identifier.to_bytes(4, 'big')


@pytest.fixture
def session_class():

    # Each test gets its own subclass so that adjusting the transport
    # behavior never leaks into another test.

    class Transport(PairTransport):
        pass

    class Session(PairSession):
        transport_class = Transport

    return Session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
