"""Sampler configuration: SamplerConfig, environment detection, and initialization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from boundrand._logging import configure_logging

__all__ = [
    'SamplerConfig',
    'get_config',
    'init',
    'reset_config',
]

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


@dataclass(frozen=True)
class SamplerConfig:
    """Configuration for boundrand samplers.

    Attributes:
        checked: Validate intervals before drawing and fail fast on violations.
            When False, arithmetic wraps modulo 2**64 and bad intervals yield
            values from a corrupted distribution.
        validate_draws: Reject source outputs outside [0, 2**64). Only applies
            when ``checked`` is True, for every sampling call alike.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
    """

    checked: bool = True
    validate_draws: bool = True
    log_level: str | None = None

    @property
    def validates_draws(self) -> bool:
        """Whether sampling calls check each source output."""
        return self.checked and self.validate_draws


# Global sampler configuration (set by init() or detected on first use)
_config: SamplerConfig | None = None


def _parse_flag(name: str) -> bool | None:
    """Read a boolean environment flag, None when unset or unrecognized."""
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return None
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logging.warning("Unknown %s value '%s', ignoring", name, raw)
    return None


def _detect_config() -> SamplerConfig:
    """Build a config from the environment.

    Reads:
    1. BOUNDRAND_CHECKED ("1"/"true"/"yes"/"on" or "0"/"false"/"no"/"off")
    2. BOUNDRAND_VALIDATE_DRAWS (same values)
    3. BOUNDRAND_LOG_LEVEL
    Anything unset falls back to the SamplerConfig defaults.
    """
    defaults = SamplerConfig()
    checked = _parse_flag('BOUNDRAND_CHECKED')
    validate_draws = _parse_flag('BOUNDRAND_VALIDATE_DRAWS')
    log_level = os.environ.get('BOUNDRAND_LOG_LEVEL') or None
    return SamplerConfig(
        checked=defaults.checked if checked is None else checked,
        validate_draws=defaults.validate_draws if validate_draws is None else validate_draws,
        log_level=log_level.upper() if log_level else None,
    )


def init(
    checked: bool | None = None,
    validate_draws: bool | None = None,
    log_level: str | None = None,
) -> SamplerConfig:
    """Initialize boundrand with the specified configuration.

    Args:
        checked: Fail fast on invalid intervals. Detected from the environment if None.
        validate_draws: Check every source output. Detected from the environment if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.

    Returns:
        The SamplerConfig that was set.

    Example:
        ```python
        import boundrand

        boundrand.init(log_level="DEBUG")
        boundrand.init(checked=False)  # inputs already validated upstream
        ```
    """
    global _config  # noqa: PLW0603

    detected = _detect_config()
    _config = SamplerConfig(
        checked=detected.checked if checked is None else checked,
        validate_draws=detected.validate_draws if validate_draws is None else validate_draws,
        log_level=log_level.upper() if log_level is not None else detected.log_level,
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level)

    return _config


def get_config() -> SamplerConfig:
    """Get the current sampler configuration.

    Detects the configuration from the environment when init() has not been
    called yet, configuring logging just as init() would when
    BOUNDRAND_LOG_LEVEL is set.
    """
    global _config  # noqa: PLW0603

    if _config is None:
        _config = _detect_config()
        if _config.log_level is not None:
            configure_logging(_config.log_level)
    return _config


def reset_config() -> None:
    """Forget the current configuration so the next get_config() re-detects it."""
    global _config  # noqa: PLW0603

    _config = None
