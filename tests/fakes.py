import aerospike


class FakeClient:
    """In-memory stand-in for ``aerospike.Client`` covering the calls the module makes."""

    def __init__(self, config=None, store=None):
        self.config = config
        self.records = {} if store is None else store
        self.connected = False
        self.calls = []
        self._failures = {}

    def fail_on(self, op, exc, key=None):
        """Make ``op`` raise ``exc``, for every key or only for ``key``."""
        self._failures[(op, key)] = exc

    def _maybe_fail(self, op, key=None):
        exc = self._failures.get((op, key)) or self._failures.get((op, None))
        if exc is not None:
            raise exc

    def connect(self):
        self._maybe_fail("connect")
        self.connected = True
        return self

    def is_connected(self):
        return self.connected

    def close(self):
        self.connected = False

    def put(self, key, bins, meta=None, policy=None):
        self.calls.append(("put", key, meta, policy))
        self._maybe_fail("put", key)
        self.records[key] = (dict(meta or {}), dict(bins))

    def get(self, key, policy=None):
        self.calls.append(("get", key, None, policy))
        self._maybe_fail("get", key)
        if key not in self.records:
            raise aerospike.exception.RecordNotFound()
        meta, bins = self.records[key]
        return key, {"gen": 1, "ttl": meta.get("ttl", 0)}, dict(bins)

    def exists(self, key, policy=None):
        self.calls.append(("exists", key, None, policy))
        self._maybe_fail("exists", key)
        if key not in self.records:
            return key, None
        return key, {"gen": 1, "ttl": self.records[key][0].get("ttl", 0)}

    def remove(self, key, meta=None, policy=None):
        self.calls.append(("remove", key, meta, policy))
        self._maybe_fail("remove", key)
        if key not in self.records:
            raise aerospike.exception.RecordNotFound()
        del self.records[key]
