from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import aerospike

from pytest_aerospike.config import AerospikeConfig
from pytest_aerospike.exceptions import ConnectionUnavailable
from pytest_aerospike.tracker import KeyTracker

logger = logging.getLogger(__name__)

ClientFactory = Callable[[dict], Any]


class AerospikeSession:
    """
    An explicit, scoped connection to an Aerospike cluster.

    A session is either available (``client`` is connected) or degraded,
    when the server could not be reached and ``fail_on_connect_error`` is off.
    The session owns the registry of seeded keys, so keys a test leaves behind
    are flushed before the next test on the same session.
    Use it as a context manager to guarantee the client is closed:

        with AerospikeSession.open(AerospikeConfig()) as session:
            session.client.put(("test", "cache", "k"), {"value": 1})
    """

    def __init__(
        self,
        config: AerospikeConfig,
        client: Optional[aerospike.Client] = None,
        error: Optional[BaseException] = None,
        client_factory: ClientFactory = aerospike.client,
    ) -> None:
        self.config = config
        self.client = client
        self.error = error
        self.client_factory = client_factory
        self.tracker = KeyTracker(client) if client is not None else None

    @classmethod
    def open(
        cls,
        config: AerospikeConfig,
        client_factory: ClientFactory = aerospike.client,
    ) -> AerospikeSession:
        host = f"{config.address}:{config.port}"
        try:
            client = client_factory(config.client_config()).connect()
        except aerospike.exception.AerospikeError as e:
            if config.fail_on_connect_error:
                raise ConnectionUnavailable(f"Could not connect to Aerospike at {host}: {e}") from e
            logger.warning("Aerospike at %s is unavailable, continuing without it: %s", host, e)
            return cls(config, error=e, client_factory=client_factory)
        logger.debug("Connected to Aerospike at %s", host)
        return cls(config, client=client, client_factory=client_factory)

    @property
    def available(self) -> bool:
        return self.client is not None

    def close(self) -> None:
        if self.client is None:
            return
        client, self.client = self.client, None
        if client.is_connected():
            client.close()
            logger.debug("Closed Aerospike connection to %s:%s", self.config.address, self.config.port)

    def __enter__(self) -> AerospikeSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "available" if self.available else "unavailable"
        return f"<AerospikeSession {self.config.address}:{self.config.port} {state}>"


def reconfigure(session: AerospikeSession, **changes: Any) -> AerospikeSession:
    """
    Open a new session from ``session``'s config with ``changes`` applied.

    The given session is left untouched; closing it remains the caller's job.
    """
    return AerospikeSession.open(session.config.replace(**changes), session.client_factory)
