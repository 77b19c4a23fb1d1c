class AerospikeModuleError(RuntimeError):
    """Base error raised by the Aerospike test module."""


class ConfigError(AerospikeModuleError, ValueError):
    """An option could not be parsed into a usable value."""


class ConnectionUnavailable(AerospikeModuleError):
    """The Aerospike server could not be reached when opening a session."""


class SeedError(AerospikeModuleError):
    """A seed write was not confirmed by the server."""
