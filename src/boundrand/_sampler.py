"""Unbiased bounded-range sampling without per-draw division.

Implements Daniel Lemire's multiply-and-reject method, "Fast Random Integer
Generation in an Interval" (https://arxiv.org/abs/1805.10941).

A uniform draw ``x`` in ``[0, 2**64)`` is multiplied by the range size ``s``.
The upper 64 bits of the exact 128-bit product are an offset in ``[0, s)``;
the lower 64 bits ``l`` are the fractional part. Offsets are biased only when
``l`` falls below ``2**64 mod s``, so that remainder (the one division) is
computed lazily, only after the cheaper test ``l < s`` has already failed.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any

import msgspec

from boundrand._config import SamplerConfig, get_config
from boundrand._logging import get_logger
from boundrand.errors import InvalidDrawError, InvalidIntervalError
from boundrand.sources import U64Source, as_source

__all__ = [
    'U64_MAX',
    'RangeSampler',
    'SampleTrace',
    'randint',
    'randrange',
    'rejection_threshold',
    'sample',
    'sample_traced',
]

_TWO64 = 1 << 64
U64_MAX = _TWO64 - 1
"""Largest value a 64-bit unsigned integer can hold."""

logger = get_logger(__name__)


class SampleTrace(msgspec.Struct, frozen=True, gc=False):
    """What a single call to the sampler did.

    Attributes:
        lo: Lower bound of the interval.
        hi: Upper bound of the interval.
        size: Number of possible outcomes, ``hi - lo + 1``.
        value: The value returned.
        draws: Draws taken from the source, rejected ones included.
        rejected: Draws thrown away by the rejection loop.
        threshold: ``2**64 mod size`` if the rejection test was reached, else None.
    """

    lo: int
    hi: int
    size: int
    value: int
    draws: int
    rejected: int
    threshold: int | None = None


def rejection_threshold(s: int) -> int:
    """Return ``2**64 mod s``, the count of low remainders that must be rejected.

    Computed as ``(2**64 - s) mod s`` in unsigned arithmetic, which is valid
    for every representable size, including sizes above ``2**63``.

    Raises:
        InvalidIntervalError: If ``s`` is not in ``[1, 2**64)``.
    """
    if not 1 <= s <= U64_MAX:
        raise InvalidIntervalError(0, s - 1, f'range size {s} is not in [1, 2**64)')
    return (_TWO64 - s) % s


def _check_draw(x: Any) -> None:
    if not isinstance(x, int) or isinstance(x, bool) or not 0 <= x <= U64_MAX:
        raise InvalidDrawError(x)


def _bounded(next_u64: Callable[[], int], s: int, validate: bool) -> tuple[int, int, int | None]:
    """Map draws onto ``[0, s)``.

    Returns:
        ``(offset, draws, threshold)``; threshold is None when the rejection
        test was never needed.
    """
    x = next_u64()
    if validate:
        _check_draw(x)
    m = s * x
    l = m & U64_MAX  # noqa: E741
    draws = 1
    threshold = None
    if l < s:
        threshold = (_TWO64 - s) % s
        while l < threshold:
            x = next_u64()
            if validate:
                _check_draw(x)
            m = s * x
            l = m & U64_MAX  # noqa: E741
            draws += 1
    return m >> 64, draws, threshold


def _range_size(lo: int, hi: int, config: SamplerConfig) -> int:
    """Return ``hi - lo + 1``, validated or wrapped depending on ``config``."""
    if not config.checked:
        return (hi - lo + 1) & U64_MAX

    reason = None
    if lo < 0 or hi < 0 or lo > U64_MAX or hi > U64_MAX:
        reason = 'bounds must be 64-bit unsigned integers'
    elif lo > hi:
        reason = 'lo must not exceed hi'
    elif hi - lo == U64_MAX:
        reason = 'range size 2**64 is not representable in 64 bits'
    if reason is not None:
        if config.log_level is not None:
            logger.warning('invalid interval', lo=lo, hi=hi, reason=reason)
        raise InvalidIntervalError(lo, hi, reason)
    return hi - lo + 1


def _sample(
    next_u64: Callable[[], int], lo: Any, hi: Any, config: SamplerConfig
) -> tuple[int, int, int, int, int | None]:
    """Run one call; returns ``(lo, hi, value, draws, threshold)``."""
    lo = operator.index(lo)
    hi = operator.index(hi)
    s = _range_size(lo, hi, config)
    offset, draws, threshold = _bounded(next_u64, s, config.validates_draws)
    if threshold is not None and config.log_level is not None:
        logger.debug('rejection test', size=s, threshold=threshold, rejected=draws - 1)
    value = lo + offset
    if not config.checked:
        value &= U64_MAX
    return lo, hi, value, draws, threshold


def _next_u64_of(rng: Any) -> Callable[[], int]:
    next_u64 = getattr(rng, 'next_u64', None)
    if next_u64 is None:
        next_u64 = as_source(rng).next_u64
    return next_u64


def sample(rng: U64Source | Any, lo: int, hi: int, *, config: SamplerConfig | None = None) -> int:
    """Return an integer drawn uniformly from the closed interval ``[lo, hi]``.

    Takes one draw from ``rng``, plus one more for every rejected draw.
    Sizes that divide ``2**64`` (one, and every power of two) never reject.

    Args:
        rng: Source of uniform 64-bit draws. Anything accepted by
            :func:`~boundrand.sources.as_source` works too.
        lo: Lower bound, ``0 <= lo <= hi``.
        hi: Upper bound, ``hi <= 2**64 - 1``. The full range ``[0, 2**64 - 1]``
            has ``2**64`` outcomes and is not supported.
        config: Overrides the global configuration for this call.

    Returns:
        A value ``v`` with ``lo <= v <= hi``.

    Raises:
        InvalidIntervalError: If the interval is invalid and checking is on.
        InvalidDrawError: If the source returns something outside ``[0, 2**64)``.

    Example:
        ```python
        from boundrand import RandomSource, sample

        src = RandomSource(seed=7)
        die = sample(src, 1, 6)
        ```
    """
    return _sample(_next_u64_of(rng), lo, hi, config or get_config())[2]


def sample_traced(
    rng: U64Source | Any, lo: int, hi: int, *, config: SamplerConfig | None = None
) -> tuple[int, SampleTrace]:
    """Like :func:`sample`, also returning a :class:`SampleTrace` of the call.

    Consumes exactly the same draws and returns the same value as ``sample``.
    """
    lo, hi, value, draws, threshold = _sample(_next_u64_of(rng), lo, hi, config or get_config())
    trace = SampleTrace(
        lo=lo,
        hi=hi,
        size=(hi - lo + 1) & U64_MAX,
        value=value,
        draws=draws,
        rejected=draws - 1,
        threshold=threshold,
    )
    return value, trace


def _randint_size(a: int, b: int) -> int:
    if a > b:
        raise InvalidIntervalError(a, b, 'empty range for randint')
    if b - a >= U64_MAX:
        raise InvalidIntervalError(a, b, 'randint interval must hold fewer than 2**64 values')
    return b - a + 1


def randint(rng: U64Source | Any, a: int, b: int) -> int:
    """Return a random integer N such that a <= N <= b.

    Bounds may be any Python integers, negative ones included, as long as the
    interval holds fewer than ``2**64`` values. The interval is always
    validated; source outputs are checked under the same rule as
    :func:`sample` (``SamplerConfig.validates_draws``).

    Raises:
        InvalidIntervalError: If ``a > b`` or the interval is too wide.
    """
    a = operator.index(a)
    s = _randint_size(a, operator.index(b))
    offset, _, _ = _bounded(_next_u64_of(rng), s, get_config().validates_draws)
    return a + offset


def randrange(rng: U64Source | Any, start: int, stop: int) -> int:
    """Return a random integer N such that start <= N < stop.

    Raises:
        InvalidIntervalError: If the range is empty or too wide.
    """
    start = operator.index(start)
    stop = operator.index(stop)
    if start >= stop:
        raise InvalidIntervalError(start, stop, 'empty range for randrange')
    return randint(rng, start, stop - 1)


class RangeSampler:
    """A source bound to a configuration, for repeated bounded draws.

    Args:
        source: Where draws come from. Anything accepted by
            :func:`~boundrand.sources.as_source`; a randomly seeded
            ``RandomSource`` when omitted.
        config: Configuration for this sampler. The global configuration
            (read at call time) when omitted.

    Attributes:
        source: The coerced source.
        draws: Total draws this sampler has taken from ``source``.

    Example:
        ```python
        from boundrand import RangeSampler, ReplaySource

        sampler = RangeSampler(ReplaySource([0, 2**63 + 1]))
        sampler.sample(0, 9)  # 5
        sampler.draws         # 2
        ```
    """

    __slots__ = ('_config', '_next_u64', 'draws', 'source')

    def __init__(self, source: Any = None, *, config: SamplerConfig | None = None) -> None:
        self.source = as_source(source)
        self._next_u64 = self.source.next_u64
        self._config = config
        self.draws = 0

    @property
    def config(self) -> SamplerConfig:
        return self._config if self._config is not None else get_config()

    def sample(self, lo: int, hi: int) -> int:
        """Return an integer drawn uniformly from ``[lo, hi]``; see :func:`sample`."""
        _, _, value, draws, _ = _sample(self._next_u64, lo, hi, self.config)
        self.draws += draws
        return value

    def sample_traced(self, lo: int, hi: int) -> tuple[int, SampleTrace]:
        value, trace = sample_traced(self.source, lo, hi, config=self.config)
        self.draws += trace.draws
        return value, trace

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        a = operator.index(a)
        s = _randint_size(a, operator.index(b))
        offset, draws, _ = _bounded(self._next_u64, s, self.config.validates_draws)
        self.draws += draws
        return a + offset

    def randrange(self, start: int, stop: int) -> int:
        """Return a random integer N such that start <= N < stop."""
        start = operator.index(start)
        stop = operator.index(stop)
        if start >= stop:
            raise InvalidIntervalError(start, stop, 'empty range for randrange')
        return self.randint(start, stop - 1)

    def __repr__(self) -> str:
        return f'RangeSampler({self.source!r}, draws={self.draws})'
