"""Tests for the statistical uniformity harness."""

from __future__ import annotations

import msgspec
import pytest
from boundrand import U64_MAX, InvalidIntervalError, RandomSource, ReplaySource
from boundrand.stats import (
    NonUniformError,
    UniformityReport,
    check_uniformity,
    expected_mean,
    expected_variance,
    measure_uniformity,
    relative_error,
)


class TestClosedForms:
    """Tests for the discrete uniform mean and variance."""

    def test_expected_mean(self) -> None:
        """The mean is the midpoint."""
        assert expected_mean(0, 9) == 4.5
        assert expected_mean(7, 7) == 7.0

    def test_expected_variance(self) -> None:
        """The variance is (s**2 - 1) / 12."""
        assert expected_variance(0, 9) == 99 / 12
        assert expected_variance(0, 1) == 0.25
        assert expected_variance(7, 7) == 0.0

    def test_variance_shift_invariant(self) -> None:
        """Shifting the interval leaves the variance unchanged."""
        assert expected_variance(2**40, 2**40 + 9) == expected_variance(0, 9)


class TestRelativeError:
    """Tests for relative_error()."""

    def test_equal(self) -> None:
        """Equal values have zero error."""
        assert relative_error(4.5, 4.5) == 0.0
        assert relative_error(0.0, 0.0) == 0.0

    def test_symmetric(self) -> None:
        """Argument order does not matter."""
        assert relative_error(99.0, 100.0) == relative_error(100.0, 99.0)
        assert relative_error(99.0, 100.0) == pytest.approx(0.01)

    def test_zero_against_positive(self) -> None:
        """Zero against a positive value is a total miss."""
        assert relative_error(0.0, 0.5) == 1.0


class TestMeasureUniformity:
    """Tests for measure_uniformity() with exact draw sequences."""

    def test_exact_two_way(self) -> None:
        """Draws 0 and 2**63 map to offsets 0 and 1 in [0, 1]."""
        report = measure_uniformity(ReplaySource([0, 2**63]), 0, 1, samples=2)
        assert report.actual_mean == 0.5
        assert report.actual_variance == 0.25
        assert report.mean_error == 0.0
        assert report.variance_error == 0.0
        assert report.passes()

    def test_large_bounds_keep_precision(self) -> None:
        """Bounds near 2**64 do not lose precision."""
        lo = U64_MAX - 1
        report = measure_uniformity(ReplaySource([0, 2**63]), lo, U64_MAX, samples=2)
        assert report.variance_error == 0.0
        assert report.expected_mean == report.actual_mean

    def test_degenerate_interval(self) -> None:
        """A one-value interval has zero variance."""
        report = measure_uniformity(RandomSource(seed=0), 3, 3, samples=100)
        assert report.actual_mean == 3.0
        assert report.actual_variance == 0.0
        assert report.passes()

    def test_report_is_encodable(self) -> None:
        """Reports survive a msgspec JSON round trip."""
        report = measure_uniformity(ReplaySource([0, 2**63]), 0, 1, samples=2)
        assert msgspec.json.decode(msgspec.json.encode(report), type=UniformityReport) == report

    def test_invalid_samples(self) -> None:
        """A non-positive sample count raises ValueError."""
        with pytest.raises(ValueError, match='samples must be positive'):
            measure_uniformity(RandomSource(seed=0), 0, 9, samples=0)

    def test_invalid_interval(self) -> None:
        """Bad intervals raise before sampling."""
        with pytest.raises(InvalidIntervalError):
            measure_uniformity(RandomSource(seed=0), 9, 0, samples=10)

    def test_moderate_sample_loose_tolerance(self) -> None:
        """A seeded source passes loose tolerances."""
        report = measure_uniformity(RandomSource(seed=11), 0, 999, samples=200_000)
        assert report.passes(mean_tolerance=0.01, variance_tolerance=0.02)


class TestCheckUniformity:
    """Tests for check_uniformity()."""

    def test_returns_report_when_passing(self) -> None:
        """A passing check returns its report."""
        report = check_uniformity(ReplaySource([0, 2**63]), 0, 1, samples=2)
        assert isinstance(report, UniformityReport)

    def test_raises_on_biased_source(self) -> None:
        """A source stuck at zero always yields offset 0."""
        with pytest.raises(NonUniformError) as exc_info:
            check_uniformity(ReplaySource([0] * 10), 0, 1, samples=10)
        report = exc_info.value.report
        assert report.actual_mean == 0.0
        assert report.mean_error == 1.0
        assert isinstance(exc_info.value, AssertionError)

    def test_custom_tolerances(self) -> None:
        """A zero tolerance fails any error."""
        with pytest.raises(NonUniformError, match='limit 0.0'):
            check_uniformity(ReplaySource([0, 0, 2**63]), 0, 1, samples=3, mean_tolerance=0.0)


@pytest.mark.slow
class TestStatisticalUniformity:
    """Five million draws per interval; mean within 0.1%, variance within 0.2%."""

    @pytest.mark.parametrize(
        ('lo', 'hi', 'seed'),
        [
            (0, 9, 1),
            (31_337, 31_337 + 52_000, 2),
            (2**40, 2**40 + 999, 3),
            (0, 2**63 + 2**61, 4),
        ],
    )
    def test_mean_and_variance(self, lo: int, hi: int, seed: int) -> None:
        """Both moments stay within tolerance."""
        report = check_uniformity(RandomSource(seed=seed), lo, hi)
        assert report.samples == 5_000_000
