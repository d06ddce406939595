import pytest

import apnsbin


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):

    for variable in ('APNSBIN_GATEWAY', 'APNSBIN_DIAL_TIMEOUT', 'APNSBIN_HANDSHAKE_TIMEOUT'):
        monkeypatch.delenv(variable, raising=False)

    apnsbin.config.reset()
    yield
    apnsbin.config.reset()


def test_gateway_defaults():

    assert apnsbin.config.gateway() == 'gateway.push.apple.com:2195'
    assert apnsbin.config.gateway(sandbox=True) == 'gateway.sandbox.push.apple.com:2195'
    assert apnsbin.config.gateway(default='localhost:2195') == 'localhost:2195'


def test_gateway_environment(monkeypatch):

    monkeypatch.setenv('APNSBIN_GATEWAY', 'push.example.com:2195')

    assert apnsbin.config.gateway() == 'push.example.com:2195'
    assert apnsbin.config.gateway(sandbox=True) == 'push.example.com:2195'
    assert apnsbin.config.gateway(default='localhost:2195') == 'localhost:2195'

    # Changes after the first lookup are ignored.

    monkeypatch.setenv('APNSBIN_GATEWAY', 'other.example.com:2195')
    assert apnsbin.config.gateway() == 'push.example.com:2195'


def test_timeout_defaults():

    assert apnsbin.config.timeout('dial') == 20
    assert apnsbin.config.timeout('handshake') == 20
    assert apnsbin.config.timeout('dial', default=5) == 5.0


def test_timeout_environment(monkeypatch):

    monkeypatch.setenv('APNSBIN_DIAL_TIMEOUT', '3.5')

    assert apnsbin.config.timeout('dial') == 3.5
    assert apnsbin.config.timeout('handshake') == 20

    session = apnsbin.Session('localhost:2195')
    assert session.dial_timeout == 3.5
    assert session.handshake_timeout == 20


def test_timeout_invalid(monkeypatch):

    with pytest.raises(ValueError):
        apnsbin.config.timeout('read')

    with pytest.raises(ValueError):
        apnsbin.config.timeout('dial', default=0)

    with pytest.raises(ValueError):
        apnsbin.config.timeout('dial', default='soon')

    monkeypatch.setenv('APNSBIN_HANDSHAKE_TIMEOUT', '-1')

    with pytest.raises(ValueError):
        apnsbin.config.timeout('handshake')


def test_session_gateway(monkeypatch):

    assert apnsbin.Session().gateway == 'gateway.push.apple.com:2195'
    assert apnsbin.Session(sandbox=True).gateway == 'gateway.sandbox.push.apple.com:2195'
    assert apnsbin.Session('localhost:2195').gateway == 'localhost:2195'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
