import pytest
import aerospike as aerospike_client

from pytest_aerospike.config import SOURCES, AerospikeConfig
from pytest_aerospike.module import AerospikeModule
from pytest_aerospike.session import AerospikeSession

_INI_HELP = {
    "address": "Aerospike host to connect to (default 127.0.0.1)",
    "port": "Aerospike port (default 3000)",
    "namespace": "Aerospike namespace to store data in (default test)",
    "set": "Aerospike set to store data in (default cache)",
    "prefix": "prefix added to every key",
    "reconnect_per_test": "open a new connection for every test (default false)",
    "cleanup": "delete seeded records after each test (default true)",
    "fail_on_connect_error": "error out when the server is unreachable instead of skipping (default true)",
    "fail_on_seed_error": "error out when a seed write fails (default true)",
}


def pytest_addoption(parser):
    group = parser.getgroup("aerospike")
    group.addoption("--aerospike-host", dest="aerospike_host", default=None, help=_INI_HELP["address"])
    group.addoption("--aerospike-port", dest="aerospike_port", default=None, help=_INI_HELP["port"])
    group.addoption("--aerospike-namespace", dest="aerospike_namespace", default=None, help=_INI_HELP["namespace"])
    group.addoption("--aerospike-set", dest="aerospike_set", default=None, help=_INI_HELP["set"])
    group.addoption("--aerospike-prefix", dest="aerospike_prefix", default=None, help=_INI_HELP["prefix"])
    group.addoption(
        "--aerospike-reconnect-per-test",
        dest="aerospike_reconnect_per_test",
        action="store_true",
        default=None,
        help=_INI_HELP["reconnect_per_test"],
    )
    group.addoption(
        "--aerospike-no-cleanup",
        dest="aerospike_cleanup",
        action="store_false",
        default=None,
        help="keep seeded records after each test",
    )
    for name, (ini_key, _) in SOURCES.items():
        parser.addini(ini_key, _INI_HELP[name])


@pytest.fixture(scope="session")
def aerospike_config(request):
    return AerospikeConfig.from_pytest(request.config)


@pytest.fixture(scope="session")
def aerospike_client_factory():
    """Callable building an unconnected client from a config dict."""
    return aerospike_client.client


@pytest.fixture(scope="session")
def aerospike_session(aerospike_config, aerospike_client_factory):
    """Suite-wide Aerospike session, closed when the run ends."""
    with AerospikeSession.open(aerospike_config, aerospike_client_factory) as session:
        yield session


def _use(session):
    if not session.available:
        pytest.skip(f"Could not connect to Aerospike: {session.error}")
    module = AerospikeModule(session)
    module.before_test()
    yield module
    module.after_test()


@pytest.fixture()
def aerospike(request, aerospike_config, aerospike_client_factory):
    """An ``AerospikeModule`` whose seeded records are removed after the test."""
    if aerospike_config.reconnect_per_test:
        with AerospikeSession.open(aerospike_config, aerospike_client_factory) as session:
            yield from _use(session)
    else:
        yield from _use(request.getfixturevalue("aerospike_session"))
