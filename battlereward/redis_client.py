"""Creating a connected Redis client from the service configuration."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path
from typing import Any

import redis

from battlereward.config import RedisConfig

logger = logging.getLogger(__name__)

_DEFAULT_READ_TIMEOUT = 3.0
_DEFAULT_DIAL_TIMEOUT = 5.0


def _timeout(value: timedelta, default: float) -> float | None:
    seconds = value.total_seconds()
    if seconds < 0:
        return None
    return seconds or default


def build_connection_kwargs(cfg: RedisConfig) -> dict[str, Any]:
    """Return keyword arguments for ``redis.Redis`` built from ``cfg``."""
    kwargs: dict[str, Any] = {
        "host": cfg.host or "localhost",
        "port": cfg.port,
        "db": cfg.database,
        "password": cfg.password or None,
        "socket_timeout": _timeout(cfg.read_timeout, _DEFAULT_READ_TIMEOUT),
        "socket_connect_timeout": _timeout(cfg.dial_timeout, _DEFAULT_DIAL_TIMEOUT),
    }
    if cfg.pool_size > 0:
        kwargs["max_connections"] = cfg.pool_size
    tls = cfg.tls_config
    if tls is not None and not tls.insecure_skip_verify:
        # Fail early when the CA bundle cannot be read.
        Path(tls.cert_file_path).read_bytes()
        kwargs.update(
            ssl=True,
            ssl_ca_certs=tls.cert_file_path,
            ssl_cert_reqs="required",
            ssl_check_hostname=True,
        )
    return kwargs


def connect_redis(cfg: RedisConfig) -> redis.Redis:
    """Create a client and check the server answers a PING."""
    try:
        client = redis.Redis(**build_connection_kwargs(cfg))
        logger.info("Pinging to Redis Server: %s %s %s", cfg.host, cfg.port, cfg.database)
        client.ping()
    except (OSError, redis.RedisError) as exc:
        raise RuntimeError(f"error when init redis client: {exc}") from exc
    logger.info("Connected to Redis Server")
    return client