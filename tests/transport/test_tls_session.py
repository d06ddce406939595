""" Exercise the real TLS transport against a local gateway, using a
    throwaway certificate authority for both the gateway and the provider
    certificates.
"""

import queue
import socket
import ssl
import threading

import pytest
import trustme

import apnsbin
from apnsbin.protocol import frame
from apnsbin.transport import tls

from conftest import error_frame, read_frame, token


@pytest.fixture(scope='module')
def authority():
    return trustme.CA()


@pytest.fixture(scope='module')
def provider(authority):
    return authority.issue_cert('provider.example.org')


class Gateway:
    """ Accept one TLS connection, require a client certificate, read one
        notification frame, and answer with the queued *replies*.
    """

    def __init__(self, authority, replies):
        self.replies = replies
        self.received = list()
        self.peer_certificate = None
        self.error = None

        self.context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        authority.issue_cert('127.0.0.1').configure_cert(self.context)
        authority.configure_trust(self.context)
        self.context.verify_mode = ssl.CERT_REQUIRED

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.socket.bind(('127.0.0.1', 0))
        self.socket.listen(1)
        self.address = '127.0.0.1:%d' % (self.socket.getsockname()[1])

        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def run(self):

        raw, _address = self.socket.accept()

        try:
            with self.context.wrap_socket(raw, server_side=True) as connection:
                self.peer_certificate = connection.getpeercert()
                self.received.append(read_frame(connection))
                connection.sendall(self.replies)

                try:
                    connection.recv(1)
                except OSError:
                    pass
        except OSError as e:
            self.error = e
        finally:
            self.socket.close()


class TrustingSession(apnsbin.Session):
    """ The gateway certificate is issued by the test authority, which the
        default context does not know about.
    """

    authority = None

    def _context(self):
        context = apnsbin.Session._context(self)
        self.authority.configure_trust(context)
        return context


def pem_blocks(provider):
    certificate = provider.cert_chain_pems[0].bytes()
    key = provider.private_key_pem.bytes()
    return certificate, key


def test_create_context_from_blocks(provider):

    certificate, key = pem_blocks(provider)

    context = tls.create_context(certificate=certificate, key=key)
    assert isinstance(context, ssl.SSLContext)

    context = tls.create_context(certificate=certificate.decode(), key=key.decode())
    assert isinstance(context, ssl.SSLContext)


def test_create_context_from_files(provider, tmp_path):

    certificate = tmp_path / 'cert.pem'
    key = tmp_path / 'key.pem'
    provider.cert_chain_pems[0].write_to_path(str(certificate))
    provider.private_key_pem.write_to_path(str(key))

    context = tls.create_context(str(certificate), str(key))
    assert isinstance(context, ssl.SSLContext)


def test_session_over_tls(authority, provider):

    gateway = Gateway(authority, error_frame(8, 7) + error_frame(10, 8))
    certificate, key = pem_blocks(provider)

    class Session(TrustingSession):
        pass

    Session.authority = authority

    channel = queue.Queue()
    session = Session(gateway.address, certificate=certificate, key=key, channel=channel)
    session.dial_timeout = 5
    session.handshake_timeout = 5

    session.connect()
    assert session.state == apnsbin.CONNECTED
    assert isinstance(session.transport, tls.TlsTransport)

    session.send(7, apnsbin.Payload('Hello'), token)

    event = channel.get(timeout=5)
    assert event.identifier == 7
    assert event.label == 'INVALID_TOKEN'

    # The shutdown report closes the session without being published.

    assert session.wait_closed(5) == True
    assert session.state == apnsbin.DISCONNECTED
    assert channel.empty()

    gateway.thread.join(5)
    assert gateway.error is None
    assert gateway.peer_certificate

    notification = frame.unpack(gateway.received[0])
    assert notification.identifier == 7
    assert notification.token == bytes.fromhex(token)
    assert apnsbin.json.loads(notification.payload) == {'aps': {'alert': 'Hello'}}


def test_untrusted_gateway(provider):

    other = trustme.CA()
    gateway = Gateway(other, b'')
    certificate, key = pem_blocks(provider)

    session = apnsbin.Session(gateway.address, certificate=certificate, key=key)
    session.handshake_timeout = 5

    with pytest.raises(apnsbin.transport.HandshakeFailed):
        session.connect()

    assert session.state == apnsbin.DISCONNECTED
    gateway.thread.join(5)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
