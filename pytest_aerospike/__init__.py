from pytest_aerospike.config import AerospikeConfig
from pytest_aerospike.exceptions import (
    AerospikeModuleError,
    ConfigError,
    ConnectionUnavailable,
    SeedError,
)
from pytest_aerospike.module import AerospikeModule
from pytest_aerospike.session import AerospikeSession, reconfigure
from pytest_aerospike.tracker import KeyTracker

__all__ = [
    "AerospikeConfig",
    "AerospikeModule",
    "AerospikeModuleError",
    "AerospikeSession",
    "ConfigError",
    "ConnectionUnavailable",
    "KeyTracker",
    "SeedError",
    "reconfigure",
]
