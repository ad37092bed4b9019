"""Environment configuration for bizconf.

Environment Variables:
    BIZCONF_LOG_LEVEL: Root log level for the CLI (default: WARNING)
    BIZCONF_SECTION_WEIGHTS: Comma-separated section=weight pairs that replace
        the default section weights, e.g. "identity=5,operations=4"

Tracing has its own BIZCONF_OTEL_* variables, see observability.tracing.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

ENV_LOG_LEVEL: Final[str] = "BIZCONF_LOG_LEVEL"
ENV_SECTION_WEIGHTS: Final[str] = "BIZCONF_SECTION_WEIGHTS"

DEFAULT_LOG_LEVEL: Final[str] = "WARNING"

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ConfigError(Exception):
    """Raised when environment configuration is invalid."""


@dataclass(frozen=True)
class BizconfConfig:
    """Process configuration (immutable).

    Attributes:
        log_level: Name of the root log level.
        section_weights: Section weight overrides, None to use the defaults.
    """

    log_level: str = DEFAULT_LOG_LEVEL
    section_weights: Mapping[str, float] | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.log_level not in _VALID_LOG_LEVELS:
            raise ConfigError(
                f"{ENV_LOG_LEVEL} must be one of {sorted(_VALID_LOG_LEVELS)}, "
                f"got {self.log_level!r}"
            )
        if self.section_weights is not None:
            for section, weight in self.section_weights.items():
                if not math.isfinite(weight) or weight < 0:
                    raise ConfigError(
                        f"{ENV_SECTION_WEIGHTS}: weight for '{section}' must be a finite "
                        f"number >= 0, got {weight}"
                    )

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


def _parse_section_weights(raw: str) -> dict[str, float]:
    """Parse "a=1,b=2.5" into a dict.

    Raises:
        ConfigError: If a pair is malformed or a weight is not a number.
    """
    weights: dict[str, float] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if "=" not in pair:
            raise ConfigError(f"{ENV_SECTION_WEIGHTS}: expected section=weight, got {pair!r}")
        section, value = pair.split("=", 1)
        section = section.strip()
        if not section:
            raise ConfigError(f"{ENV_SECTION_WEIGHTS}: empty section name in {pair!r}")
        try:
            weights[section] = float(value.strip())
        except ValueError as e:
            raise ConfigError(
                f"{ENV_SECTION_WEIGHTS}: weight for '{section}' is not a number: {value!r}"
            ) from e
    return weights


def load_config() -> BizconfConfig:
    """Load configuration from the environment.

    Raises:
        ConfigError: If any value is set but invalid.
    """
    log_level = os.environ.get(ENV_LOG_LEVEL, "").strip().upper() or DEFAULT_LOG_LEVEL

    raw_weights = os.environ.get(ENV_SECTION_WEIGHTS, "").strip()
    section_weights = (
        MappingProxyType(_parse_section_weights(raw_weights)) if raw_weights else None
    )

    return BizconfConfig(log_level=log_level, section_weights=section_weights)
