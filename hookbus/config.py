"""Environment-driven settings for hookbus."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from hookbus.errors import ConfigError

ENV_PREFIX = "HOOKBUS_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().strip('"').strip("'").lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class HookBusSettings:
    """Runtime settings.

    Attributes:
        log_level: Minimum log level name
        json_logs: Render logs as JSON instead of console lines
        log_colors: Colorize console output
    """

    log_level: str = "INFO"
    json_logs: bool = False
    log_colors: bool = True

    def __post_init__(self) -> None:
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
        object.__setattr__(self, "log_level", self.log_level.upper())

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> HookBusSettings:
        """Load settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            HookBusSettings instance
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        if level := env.get(f"{ENV_PREFIX}LOG_LEVEL"):
            kwargs["log_level"] = level.strip()
        for field_name, var in (("json_logs", "LOG_JSON"), ("log_colors", "LOG_COLORS")):
            raw = env.get(f"{ENV_PREFIX}{var}")
            if raw is not None and raw.strip():
                kwargs[field_name] = _parse_bool(f"{ENV_PREFIX}{var}", raw)

        return cls(**kwargs)
