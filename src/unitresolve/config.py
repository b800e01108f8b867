"""
Resolution Configuration.

All values configurable via UNITRESOLVE_* environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from unitresolve.exceptions import ConfigError


DEFAULT_MAX_RECORDED_BUGS = 100
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _env_int(key: str, default: int) -> int:
    """Read integer from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    """Read boolean from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


@dataclass
class ResolutionConfig:
    """
    Settings for the resolution pipeline and its fault channel.

    Environment Variables:
        UNITRESOLVE_TRACE: Log entry/exit timing of public operations (default: true)
        UNITRESOLVE_MAX_BUGS: Max distinct bugs kept in memory (default: 100)
        UNITRESOLVE_PANIC_ON_BUGS: Raise BugPanic instead of recording (default: false)
        UNITRESOLVE_LOG_LEVEL: Console log level (default: INFO)
    """

    trace_enabled: bool = field(default_factory=lambda: _env_bool(
        "UNITRESOLVE_TRACE", True
    ))
    max_recorded_bugs: int = field(default_factory=lambda: _env_int(
        "UNITRESOLVE_MAX_BUGS", DEFAULT_MAX_RECORDED_BUGS
    ))
    panic_on_bugs: bool = field(default_factory=lambda: _env_bool(
        "UNITRESOLVE_PANIC_ON_BUGS", False
    ))
    log_level: str = field(default_factory=lambda: os.getenv(
        "UNITRESOLVE_LOG_LEVEL", DEFAULT_LOG_LEVEL
    ).upper())

    def __post_init__(self):
        if self.max_recorded_bugs < 0:
            raise ConfigError(f"max_recorded_bugs must be >= 0, got {self.max_recorded_bugs}")
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(f"unknown log level {self.log_level!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trace_enabled": self.trace_enabled,
            "max_recorded_bugs": self.max_recorded_bugs,
            "panic_on_bugs": self.panic_on_bugs,
            "log_level": self.log_level,
        }


_config: Optional[ResolutionConfig] = None


def get_config() -> ResolutionConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = ResolutionConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
