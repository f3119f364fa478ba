"""Statistical checks for bounded-range samplers.

Compares the empirical mean and variance of many draws from one interval
against the closed forms of the discrete uniform distribution over
``s = hi - lo + 1`` consecutive integers:

    mean     = (lo + hi) / 2
    variance = (s**2 - 1) / 12

Sums are accumulated as exact integers over offsets from ``lo``, so large
bounds do not lose precision before the final division.
"""

from __future__ import annotations

import operator
from typing import Any

import msgspec

from boundrand._config import SamplerConfig, get_config
from boundrand._logging import get_logger
from boundrand._sampler import _bounded, _next_u64_of, _range_size
from boundrand.sources import U64Source

__all__ = [
    'DEFAULT_MEAN_TOLERANCE',
    'DEFAULT_SAMPLES',
    'DEFAULT_VARIANCE_TOLERANCE',
    'NonUniformError',
    'UniformityReport',
    'check_uniformity',
    'expected_mean',
    'expected_variance',
    'measure_uniformity',
    'relative_error',
]

DEFAULT_SAMPLES = 5_000_000
DEFAULT_MEAN_TOLERANCE = 0.001
DEFAULT_VARIANCE_TOLERANCE = 0.002

logger = get_logger(__name__)


class UniformityReport(msgspec.Struct, frozen=True):
    """Empirical versus expected moments for one interval."""

    lo: int
    hi: int
    samples: int
    expected_mean: float
    actual_mean: float
    expected_variance: float
    actual_variance: float
    mean_error: float
    variance_error: float

    def passes(
        self,
        mean_tolerance: float = DEFAULT_MEAN_TOLERANCE,
        variance_tolerance: float = DEFAULT_VARIANCE_TOLERANCE,
    ) -> bool:
        """True if both relative errors are strictly below their tolerances."""
        return self.mean_error < mean_tolerance and self.variance_error < variance_tolerance


class NonUniformError(AssertionError):
    """Empirical moments drifted too far from the uniform distribution."""

    def __init__(self, report: UniformityReport, mean_tolerance: float, variance_tolerance: float) -> None:
        self.report = report
        self.mean_tolerance = mean_tolerance
        self.variance_tolerance = variance_tolerance
        super().__init__(
            f'[{report.lo}, {report.hi}] over {report.samples} samples: '
            f'mean error {report.mean_error:.6f} (limit {mean_tolerance}), '
            f'variance error {report.variance_error:.6f} (limit {variance_tolerance})'
        )


def expected_mean(lo: int, hi: int) -> float:
    return (lo + hi) / 2


def expected_variance(lo: int, hi: int) -> float:
    s = hi - lo + 1
    return (s * s - 1) / 12


def relative_error(actual: float, expected: float) -> float:
    """Return ``1 - min / max`` of the two values; 0 when they are equal."""
    if actual == expected:
        return 0.0
    larger = max(actual, expected)
    if larger <= 0:
        return 1.0
    return 1.0 - min(actual, expected) / larger


def measure_uniformity(
    rng: U64Source | Any,
    lo: int,
    hi: int,
    samples: int = DEFAULT_SAMPLES,
    *,
    config: SamplerConfig | None = None,
) -> UniformityReport:
    """Draw ``samples`` values from ``[lo, hi]`` and report their first two moments.

    Raises:
        ValueError: If ``samples`` is not positive.
        InvalidIntervalError: If the interval is invalid.
    """
    if samples < 1:
        msg = f'samples must be positive, got {samples}'
        raise ValueError(msg)

    cfg = config or get_config()
    lo = operator.index(lo)
    hi = operator.index(hi)
    s = _range_size(lo, hi, cfg)
    validate = cfg.validates_draws
    next_u64 = _next_u64_of(rng)

    total = 0
    total_sq = 0
    for _ in range(samples):
        offset = _bounded(next_u64, s, validate)[0]
        total += offset
        total_sq += offset * offset

    actual_mean = lo + total / samples
    actual_variance = (samples * total_sq - total * total) / (samples * samples)
    mean = expected_mean(lo, hi)
    variance = expected_variance(lo, hi)
    return UniformityReport(
        lo=lo,
        hi=hi,
        samples=samples,
        expected_mean=mean,
        actual_mean=actual_mean,
        expected_variance=variance,
        actual_variance=actual_variance,
        mean_error=relative_error(actual_mean, mean),
        variance_error=relative_error(actual_variance, variance),
    )


def check_uniformity(
    rng: U64Source | Any,
    lo: int,
    hi: int,
    samples: int = DEFAULT_SAMPLES,
    *,
    mean_tolerance: float = DEFAULT_MEAN_TOLERANCE,
    variance_tolerance: float = DEFAULT_VARIANCE_TOLERANCE,
    config: SamplerConfig | None = None,
) -> UniformityReport:
    """Measure uniformity and fail if either moment is out of tolerance.

    Returns:
        The report, when it passes.

    Raises:
        NonUniformError: If the mean or variance error reaches its tolerance.
    """
    cfg = config or get_config()
    report = measure_uniformity(rng, lo, hi, samples, config=cfg)
    if cfg.log_level is not None:
        logger.info('uniformity report', **msgspec.structs.asdict(report))
    if not report.passes(mean_tolerance, variance_tolerance):
        raise NonUniformError(report, mean_tolerance, variance_tolerance)
    return report
