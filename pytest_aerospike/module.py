from __future__ import annotations

import logging
from typing import Any, Optional

import aerospike

from pytest_aerospike.config import AerospikeConfig
from pytest_aerospike.exceptions import AerospikeModuleError, ConnectionUnavailable, SeedError
from pytest_aerospike.session import AerospikeSession
from pytest_aerospike.tracker import Key, KeyTracker

logger = logging.getLogger(__name__)

BIN = "value"

_UNSET = object()


class AerospikeModule:
    """
    Test-facing verbs over an Aerospike session.

    Every record is stored under ``(namespace, set, prefix + key)`` with a
    single ``value`` bin. Records written with :meth:`seed` are tracked and
    removed after the test when ``cleanup`` is enabled.

        def test_users_count(aerospike):
            aerospike.seed("users_count", 3)
            aerospike.assert_present("users_count", 3)
            assert aerospike.fetch("users_count") == 3
    """

    def __init__(self, session: AerospikeSession, tracker: Optional[KeyTracker] = None) -> None:
        if not session.available:
            raise ConnectionUnavailable(f"Aerospike session is not available: {session.error}")
        self.session = session
        self.tracker = tracker if tracker is not None else session.tracker

    @property
    def config(self) -> AerospikeConfig:
        return self.session.config

    @property
    def client(self) -> aerospike.Client:
        """The underlying ``aerospike.Client``."""
        return self.session.client

    def build_key(self, key: str) -> Key:
        cfg = self.config
        return (cfg.namespace, cfg.set, f"{cfg.prefix}{key}")

    # ---------- lifecycle ----------
    def before_test(self) -> None:
        if self.config.cleanup:
            self.tracker.flush()

    def after_test(self) -> None:
        if self.config.cleanup:
            self.tracker.flush()

    def cleanup(self) -> int:
        """Delete every record seeded so far."""
        return self.tracker.flush()

    # ---------- aerospike io ----------
    def _get(self, key: Key) -> Optional[dict]:
        try:
            _, _, bins = self.client.get(key)
        except aerospike.exception.RecordNotFound:
            return None
        except aerospike.exception.AerospikeError as e:
            raise AerospikeModuleError(f"Aerospike get failed for {key}: {e}") from e
        return bins or {}

    # ---------- verbs ----------
    def seed(self, key: str, value: Any, ttl: int = 0) -> Optional[Key]:
        """
        Insert ``value`` under ``key``; the record is erased after the test.

        ``ttl`` is in seconds, 0 keeps the namespace default. Returns the
        full Aerospike key, or ``None`` when the write failed and
        ``fail_on_seed_error`` is off.
        """
        as_key = self.build_key(key)
        try:
            self.client.put(as_key, {BIN: value}, meta={"ttl": ttl})
        except aerospike.exception.AerospikeError as e:
            if self.config.fail_on_seed_error:
                raise SeedError(f"Aerospike put failed for {as_key}: {e}") from e
            logger.warning("Aerospike put failed for %s, not seeded: %s", as_key, e)
            return None

        self.tracker.record(as_key)
        logger.debug("Aerospike seeded %s = %r", as_key, value)
        return as_key

    def fetch(self, key: str) -> Any:
        """Stored value of ``key``, ``None`` if there is no such record."""
        bins = self._get(self.build_key(key))
        value = None if bins is None else bins.get(BIN)
        logger.debug("Aerospike value of %r: %r", key, value)
        return value

    def assert_present(self, key: str, value: Any = _UNSET) -> None:
        """Fail unless ``key`` exists and, if ``value`` is given, holds it."""
        as_key = self.build_key(key)
        bins = self._get(as_key)
        if bins is None:
            raise AssertionError(f"Record {as_key} not found in Aerospike")
        actual = bins.get(BIN)
        logger.debug("Aerospike value of %r: %r", key, actual)
        if value is not _UNSET and actual != value:
            raise AssertionError(f"Record {as_key} holds {actual!r}, expected {value!r}")

    def assert_absent(self, key: str, value: Any = _UNSET) -> None:
        """
        Fail if ``key`` exists.

        With ``value``, fail only if the record exists and holds exactly that value.
        """
        as_key = self.build_key(key)
        bins = self._get(as_key)
        if bins is None:
            return
        actual = bins.get(BIN)
        logger.debug("Aerospike value of %r: %r", key, actual)
        if value is _UNSET:
            raise AssertionError(f"Record {as_key} exists in Aerospike with {actual!r}")
        if actual == value:
            raise AssertionError(f"Record {as_key} unexpectedly holds {value!r}")
