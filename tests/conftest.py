import os
import pytest

from fakes import FakeClient
from pytest_aerospike import AerospikeConfig, AerospikeModule, AerospikeSession


def _connect_client():
    import aerospike
    host = os.getenv("AEROSPIKE_HOST", "127.0.0.1")
    port = int(os.getenv("AEROSPIKE_PORT", "3000"))
    cfg = {"hosts": [(host, port)]}
    client = aerospike.client(cfg).connect()
    return client


@pytest.fixture(scope="session")
def aerospike_namespace():
    return os.getenv("AEROSPIKE_NAMESPACE", "test")


@pytest.fixture(scope="session")
def client():
    """A live Aerospike client; tests using it are skipped without a server."""
    import aerospike
    try:
        c = _connect_client()
    except aerospike.exception.AerospikeError as e:
        pytest.skip(f"Could not connect to Aerospike: {e}")
    yield c
    c.close()


@pytest.fixture()
def fake_client():
    return FakeClient().connect()


@pytest.fixture()
def cfg_base():
    return AerospikeConfig(namespace="test", set="cache")


@pytest.fixture()
def session(fake_client, cfg_base):
    return AerospikeSession(cfg_base, client=fake_client)


@pytest.fixture()
def aero(session):
    return AerospikeModule(session)
