import logging

import aerospike
import pytest

from fakes import FakeClient
from pytest_aerospike import AerospikeConfig, AerospikeSession, ConnectionUnavailable, reconfigure


class Factory:
    def __init__(self, fail=False):
        self.fail = fail
        self.clients = []

    def __call__(self, config):
        client = FakeClient(config)
        if self.fail:
            client.fail_on("connect", aerospike.exception.ClientError())
        self.clients.append(client)
        return client


def test_open_connects_with_client_config():
    factory = Factory()
    session = AerospikeSession.open(AerospikeConfig(address="db", port=3100), factory)
    assert session.available
    assert session.client is factory.clients[0]
    assert session.client.config == {"hosts": [("db", 3100)]}
    assert session.client.is_connected()


def test_open_failure_is_fatal_by_default():
    with pytest.raises(ConnectionUnavailable, match="127.0.0.1:3000"):
        AerospikeSession.open(AerospikeConfig(), Factory(fail=True))


def test_open_failure_can_degrade(caplog):
    cfg = AerospikeConfig(fail_on_connect_error=False)
    with caplog.at_level(logging.WARNING, logger="pytest_aerospike.session"):
        session = AerospikeSession.open(cfg, Factory(fail=True))
    assert not session.available
    assert session.client is None
    assert isinstance(session.error, aerospike.exception.ClientError)
    assert "unavailable" in caplog.text
    session.close()


def test_context_manager_closes_once():
    factory = Factory()
    with AerospikeSession.open(AerospikeConfig(), factory) as session:
        client = session.client
    assert not client.is_connected()
    assert not session.available
    session.close()


def test_reconfigure_returns_new_session():
    factory = Factory()
    session = AerospikeSession.open(AerospikeConfig(), factory)

    other = reconfigure(session, prefix="p:", set="users")

    assert other is not session
    assert (other.config.prefix, other.config.set) == ("p:", "users")
    assert session.config.prefix == ""
    assert session.client.is_connected()
    assert other.client is factory.clients[1]
