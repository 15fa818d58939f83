"""Service configuration for relayrules."""

from __future__ import annotations

import dataclasses
import os
from datetime import timedelta, timezone
from pathlib import Path
from typing import Any

from relayrules._constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_RULES_PATH,
    DEFAULT_UTC_OFFSET_HOURS,
)
from relayrules.exceptions import ConfigError


def _env_number(env_key: str, value: str, convert: type[int] | type[float]) -> int | float:
    try:
        return convert(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be numeric, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class RulesConfig:
    """Service configuration.

    Parameters
    ----------
    rules_path : Path
        JSON file holding the circuit/relay rule set. It is read on every
        request and rewritten in full on every successful patch.
    host : str
        Interface the HTTP server binds to.
    port : int
        TCP port the HTTP server listens on.
    utc_offset_hours : float
        Fixed offset used to interpret schedule times of day. Defaults to
        UTC+3.
    """

    rules_path: Path = Path(DEFAULT_RULES_PATH)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS

    def __post_init__(self) -> None:
        if not -24 < self.utc_offset_hours < 24:
            raise ConfigError(f"utc_offset_hours must be strictly between -24 and 24, got {self.utc_offset_hours}")

    @property
    def tz(self) -> timezone:
        """Fixed timezone schedules are evaluated in."""
        return timezone(timedelta(hours=self.utc_offset_hours))

    @classmethod
    def from_env(cls, **overrides: Any) -> RulesConfig:
        """Create configuration from environment variables.

        Reads the optional ``RELAYRULES_*`` variables. Explicit keyword
        arguments override environment values.

        Raises
        ------
        ConfigError
            When a numeric variable cannot be parsed or the UTC offset is
            out of range.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        path_env = env.get("RELAYRULES_RULES_PATH")
        if path_env is not None and "rules_path" not in overrides:
            config_kwargs["rules_path"] = Path(path_env)

        host_env = env.get("RELAYRULES_HOST")
        if host_env is not None and "host" not in overrides:
            config_kwargs["host"] = host_env

        port_env = env.get("RELAYRULES_PORT")
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _env_number("RELAYRULES_PORT", port_env, int)

        offset_env = env.get("RELAYRULES_UTC_OFFSET_HOURS")
        if offset_env is not None and "utc_offset_hours" not in overrides:
            config_kwargs["utc_offset_hours"] = _env_number("RELAYRULES_UTC_OFFSET_HOURS", offset_env, float)

        if "rules_path" in overrides:
            overrides["rules_path"] = Path(overrides["rules_path"])
        config_kwargs.update(overrides)

        return cls(**config_kwargs)
