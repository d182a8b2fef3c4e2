import logging
import os
from dataclasses import dataclass, replace
from typing import Optional

ENV_PREFIX = "TOY_PAYMENTS_"

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return default
    value = value.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


def _env_log_level(default: str) -> str:
    value = os.getenv(ENV_PREFIX + "LOG_LEVEL", "").strip().upper()
    return value or default


@dataclass(frozen=True)
class EngineConfig:
    log_level: str = "WARNING"
    report_stats: bool = True

    def __post_init__(self):
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        defaults = cls()
        return cls(
            log_level=_env_log_level(defaults.log_level),
            report_stats=_env_flag("REPORT_STATS", defaults.report_stats),
        )

    def with_overrides(self, log_level: Optional[str] = None, report_stats: Optional[bool] = None) -> "EngineConfig":
        changes = {}
        if log_level is not None:
            changes["log_level"] = log_level.upper()
        if report_stats is not None:
            changes["report_stats"] = report_stats
        return replace(self, **changes)
