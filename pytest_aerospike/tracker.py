from __future__ import annotations

import logging
from typing import Any, Iterator, List, Tuple

import aerospike

logger = logging.getLogger(__name__)

Key = Tuple[str, str, Any]

# retry a failed delete once
REMOVE_POLICY = {"max_retries": 1}


class KeyTracker:
    """
    Remembers the keys seeded during a test so they can be deleted afterwards.

    Keys are kept in insertion order and are not deduplicated. ``flush()``
    deletes whatever still exists and always leaves the tracker empty; a record
    the test already removed is not an error, and a failed delete is logged
    instead of aborting the pass.
    """

    def __init__(self, client: aerospike.Client) -> None:
        self.client = client
        self._keys: List[Key] = []

    def record(self, key: Key) -> None:
        self._keys.append(key)

    @property
    def keys(self) -> List[Key]:
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[Key]:
        return iter(list(self._keys))

    # ---------- cleanup ----------
    def _exists(self, key: Key) -> bool:
        try:
            _, meta = self.client.exists(key)
        except aerospike.exception.RecordNotFound:
            return False
        return meta is not None

    def flush(self) -> int:
        """Delete every tracked record that still exists. Returns how many were deleted."""
        deleted = 0
        try:
            for key in self._keys:
                try:
                    if not self._exists(key):
                        continue
                    self.client.remove(key, policy=REMOVE_POLICY)
                    deleted += 1
                except aerospike.exception.RecordNotFound:
                    # removed between the existence check and the delete
                    continue
                except aerospike.exception.AerospikeError as e:
                    logger.error("Aerospike cleanup failed for %s: %s", key, e)
        finally:
            self._keys.clear()
        if deleted:
            logger.debug("Aerospike cleanup removed %d record(s)", deleted)
        return deleted
