"""Server configuration for hqtrack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from hqtrack._constants import DEFAULT_HOST, DEFAULT_IDLE_TIMEOUT, DEFAULT_POOL_SIZE
from hqtrack.exceptions import HqConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise HqConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class HqConfig:
    """Server configuration.

    Parameters
    ----------
    port : int
        TCP port the terminals connect to. ``0`` picks a free port.
    database_url : str
        Store location. ``mysql://`` URLs are routed to the aiomysql
        driver, any other SQLAlchemy async URL is used as-is and
        ``memory://`` selects the in-process store.
    host : str
        Interface to bind.
    idle_timeout : float
        Seconds a connection may go without delivering a complete frame
        before it is closed.
    pool_size : int
        Upper bound on concurrent store connections shared by all
        terminal connections.
    create_schema : bool
        Create the ``locations`` table on startup when missing.
    """

    port: int
    database_url: str
    host: str = DEFAULT_HOST
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT
    pool_size: int = DEFAULT_POOL_SIZE
    create_schema: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise HqConfigError(f"port must be between 0 and 65535, got {self.port}")
        if not self.database_url:
            raise HqConfigError("database_url must not be empty")
        if self.idle_timeout <= 0:
            raise HqConfigError(f"idle_timeout must be positive, got {self.idle_timeout}")
        if self.pool_size < 1:
            raise HqConfigError(f"pool_size must be at least 1, got {self.pool_size}")

    @classmethod
    def from_env(cls, **overrides: Any) -> HqConfig:
        """Create configuration from environment variables.

        Reads ``PORT`` and ``DATABASE_URL`` plus the optional ``HQ_*``
        variables. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        HqConfig
            Populated configuration.

        Raises
        ------
        HqConfigError
            When a required value is missing or a value does not parse.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        port_env = env.get("PORT")
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _env_number("PORT", port_env, int)

        url_env = env.get("DATABASE_URL")
        if url_env is not None and "database_url" not in overrides:
            config_kwargs["database_url"] = url_env

        host_env = env.get("HQ_HOST")
        if host_env is not None and "host" not in overrides:
            config_kwargs["host"] = host_env

        timeout_env = env.get("HQ_IDLE_TIMEOUT")
        if timeout_env is not None and "idle_timeout" not in overrides:
            config_kwargs["idle_timeout"] = _env_number("HQ_IDLE_TIMEOUT", timeout_env, float)

        pool_env = env.get("HQ_POOL_SIZE")
        if pool_env is not None and "pool_size" not in overrides:
            config_kwargs["pool_size"] = _env_number("HQ_POOL_SIZE", pool_env, int)

        if "create_schema" not in overrides:
            config_kwargs["create_schema"] = _env_bool(env.get("HQ_CREATE_SCHEMA"), False)

        config_kwargs.update(overrides)

        for required, env_key in (("port", "PORT"), ("database_url", "DATABASE_URL")):
            if config_kwargs.get(required) is None:
                raise HqConfigError(f"Missing {env_key} environment variable")

        return cls(**config_kwargs)
