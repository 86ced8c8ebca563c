"""Service configuration: loading settings from YAML and the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

ENV_PREFIX = "SVC"
ENV_CONFIG_ENABLED = "ENV_CONFIG_ENABLED"
ENV_CONFIG_PATH = "CONFIG_PATH"
DEFAULT_CONFIG_PATH = "./infra/config"
CONFIG_NAME = "config"

_UNIT_NS = {
    "ns": 1, "us": 1_000, "µs": 1_000, "μs": 1_000, "ms": 1_000_000,
    "s": 1_000_000_000, "m": 60_000_000_000, "h": 3_600_000_000_000,
}
_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_MAX_NS = 2**63 - 1
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
# Settings keys whose field name differs.
_RENAMED = {"pass": "password"}


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "300ms", "-1.5h" or "2h45m"."""
    error = ValueError(f'time: invalid duration "{text}"')
    negative = text[:1] == "-"
    rest = text[1:] if text[:1] in ("+", "-") else text
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise error
    total = Decimal(0)
    pos = 0
    while pos < len(rest):
        match = _COMPONENT.match(rest, pos)
        if match is None:
            raise error
        total += Decimal(match.group(1)) * _UNIT_NS[match.group(2)]
        pos = match.end()
    if total > _MAX_NS:
        raise error
    micro = int(total / 1000)
    return timedelta(microseconds=-micro if negative else micro)


def _parse_bool(text: str) -> bool:
    if text in _TRUE or text in _FALSE:
        return text in _TRUE
    raise ValueError(f'strconv.ParseBool: parsing "{text}": invalid syntax')


def _as_str(value: Any, key: str) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"{key}: expected a string, got {type(value).__name__}")


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, (bool, int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value, 0) if value else 0
        except ValueError:
            raise ValueError(f"{key}: cannot parse {value!r} as an integer") from None
    raise ValueError(f"{key}: expected an integer, got {type(value).__name__}")


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, (bool, int, float)):
        return bool(value)
    if isinstance(value, str):
        return bool(value) and _parse_bool(value)
    raise ValueError(f"{key}: expected a boolean, got {type(value).__name__}")


def _as_duration(value: Any, key: str) -> timedelta:
    if isinstance(value, timedelta):
        return value
    if isinstance(value, str):
        return parse_duration(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return timedelta(microseconds=int(value) // 1000)
    raise ValueError(f"{key}: expected a duration, got {type(value).__name__}")


def _lower_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        str(key).lower(): _lower_keys(value) if isinstance(value, Mapping) else value
        for key, value in data.items()
    }


def _decode(cls: type, value: Any, key: str) -> Any:
    if not isinstance(value, Mapping):
        raise ValueError(f"{key}: expected a mapping")
    data = {_RENAMED.get(name, name): item for name, item in value.items()}
    kwargs = {}
    for spec in fields(cls):
        item = data.get(spec.name)
        if item is not None:
            kwargs[spec.name] = _CONVERTERS[spec.type](item, spec.name)
    return cls(**kwargs)


@dataclass
class TLSConfig:
    cert_file_path: str = ""
    insecure_skip_verify: bool = False


@dataclass
class RedisConfig:
    host: str = ""
    password: str = str()
    port: int = 0
    database: int = 0
    ttl: timedelta = timedelta(0)
    pool_size: int = 0
    min_idle_conns: int = 0
    write_timeout: timedelta = timedelta(0)
    read_timeout: timedelta = timedelta(0)
    dial_timeout: timedelta = timedelta(0)
    tls_config: TLSConfig | None = None


@dataclass
class HTTPServerConfig:
    addr: str = ""


@dataclass
class Config:
    """All options of the service."""

    http_server: HTTPServerConfig = field(default_factory=HTTPServerConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Config:
        """Decode settings, converting loosely typed values as needed."""
        return _decode(cls, _lower_keys(data), "config")


_CONVERTERS = {
    "str": _as_str,
    "int": _as_int,
    "bool": _as_bool,
    "timedelta": _as_duration,
    "TLSConfig | None": lambda value, key: _decode(TLSConfig, value, key),
    "HTTPServerConfig": lambda value, key: _decode(HTTPServerConfig, value, key),
    "RedisConfig": lambda value, key: _decode(RedisConfig, value, key),
}


def _read_yaml(directory: str) -> dict[str, Any]:
    base = Path(directory)
    for name in (f"{CONFIG_NAME}.yaml", f"{CONFIG_NAME}.yml", CONFIG_NAME):
        candidate = base / name
        if candidate.is_file():
            with candidate.open(encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
            if data is None:
                return {}
            if not isinstance(data, Mapping):
                raise ValueError(f"{candidate}: top level must be a mapping")
            return _lower_keys(data)
    raise FileNotFoundError(
        f'Config File "{CONFIG_NAME}" Not Found in "[{base.resolve()}]"'
    )


def _apply_env(
    settings: Mapping[str, Any], environ: Mapping[str, str], prefix: tuple[str, ...]
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in settings.items():
        path = (*prefix, key)
        if isinstance(value, Mapping):
            result[key] = _apply_env(value, environ, path)
        else:
            result[key] = environ.get("_".join((ENV_PREFIX, *path)).upper()) or value
    return result


def read_settings(
    path: str | None = None, environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Read raw settings from config.yaml in ``path`` plus SVC_* overrides.

    Environment variables only override keys present in the file. When
    ENV_CONFIG_ENABLED is true no file is read and no settings are returned.
    """
    env = os.environ if environ is None else environ
    if path is None:
        path = env.get(ENV_CONFIG_PATH) or DEFAULT_CONFIG_PATH
    if _parse_bool(env.get(ENV_CONFIG_ENABLED) or "false"):
        return {}
    return _apply_env(_read_yaml(path), env, ())


def load_config(settings: Mapping[str, Any]) -> Config:
    """Build the service configuration from raw settings."""
    return Config.from_mapping(settings)