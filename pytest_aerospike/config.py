from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from pytest_aerospike.exceptions import ConfigError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

# field name -> (ini key, env var)
SOURCES: Dict[str, Tuple[str, str]] = {
    "address": ("aerospike_host", "AEROSPIKE_HOST"),
    "port": ("aerospike_port", "AEROSPIKE_PORT"),
    "namespace": ("aerospike_namespace", "AEROSPIKE_NAMESPACE"),
    "set": ("aerospike_set", "AEROSPIKE_SET"),
    "prefix": ("aerospike_prefix", "AEROSPIKE_PREFIX"),
    "reconnect_per_test": ("aerospike_reconnect_per_test", "AEROSPIKE_RECONNECT_PER_TEST"),
    "cleanup": ("aerospike_cleanup", "AEROSPIKE_CLEANUP"),
    "fail_on_connect_error": ("aerospike_fail_on_connect_error", "AEROSPIKE_FAIL_ON_CONNECT_ERROR"),
    "fail_on_seed_error": ("aerospike_fail_on_seed_error", "AEROSPIKE_FAIL_ON_SEED_ERROR"),
}

_BOOL_FIELDS = {"reconnect_per_test", "cleanup", "fail_on_connect_error", "fail_on_seed_error"}


def parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{name}: expected a boolean, got {raw!r}")


def parse_port(raw: Any) -> int:
    try:
        port = int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"port: expected an integer, got {raw!r}") from e
    if not 0 < port < 65536:
        raise ConfigError(f"port: {port} is out of range")
    return port


def _coerce(name: str, raw: Any) -> Any:
    if name in _BOOL_FIELDS:
        return parse_bool(name, raw)
    if name == "port":
        return parse_port(raw)
    return str(raw)


@dataclass(frozen=True)
class AerospikeConfig:
    """
    Connection and behaviour options of the Aerospike test module.

    Values come from, in increasing priority: the defaults below, the pytest
    ini file, ``AEROSPIKE_*`` environment variables and the command line.

        [tool.pytest.ini_options]
        aerospike_host = "127.0.0.1"
        aerospike_port = "3000"
        aerospike_namespace = "test"
        aerospike_set = "cache"
        aerospike_cleanup = "true"

    Be sure you don't point it at a production server: seeded records are
    deleted after every test.
    """

    address: str = "127.0.0.1"
    port: int = 3000
    namespace: str = "test"
    set: str = "cache"
    prefix: str = ""
    reconnect_per_test: bool = False
    cleanup: bool = True
    fail_on_connect_error: bool = True
    fail_on_seed_error: bool = True
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "port", parse_port(self.port))
        for name in _BOOL_FIELDS:
            object.__setattr__(self, name, parse_bool(name, getattr(self, name)))
        if not self.namespace:
            raise ConfigError("namespace must not be empty")

    # ---------- construction ----------
    @classmethod
    def from_layers(cls, *layers: Mapping[str, Any]) -> AerospikeConfig:
        """
        Build a config from raw ``{field: value}`` mappings; later layers win.

        String values are coerced to the field's type, ``None`` and empty
        strings are treated as unset.
        """
        values: Dict[str, Any] = {}
        for layer in layers:
            for name, raw in layer.items():
                if name == "options":
                    values["options"] = dict(raw or {})
                    continue
                if name not in SOURCES:
                    raise ConfigError(f"unknown option {name!r}")
                if raw is None or raw == "":
                    continue
                values[name] = _coerce(name, raw)
        return cls(**values)

    @staticmethod
    def env_layer(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        env = os.environ if environ is None else environ
        return {name: env[var] for name, (_, var) in SOURCES.items() if var in env}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> AerospikeConfig:
        return cls.from_layers(cls.env_layer(environ))

    @classmethod
    def from_pytest(cls, config, environ: Optional[Mapping[str, str]] = None) -> AerospikeConfig:
        """Resolve options from a ``pytest.Config``: ini < environment < command line."""
        ini = {name: config.getini(ini_key) for name, (ini_key, _) in SOURCES.items()}
        cli = {name: config.getoption(ini_key, None) for name, (ini_key, _) in SOURCES.items()}
        return cls.from_layers(ini, cls.env_layer(environ), cli)

    def replace(self, **changes: Any) -> AerospikeConfig:
        return dataclasses.replace(self, **changes)

    # ---------- client ----------
    def client_config(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = dict(self.options)
        cfg["hosts"] = [(self.address, self.port)]
        return cfg
