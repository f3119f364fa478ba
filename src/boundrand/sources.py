"""Sources of uniform 64-bit randomness.

The sampler consumes randomness through a single capability: ``next_u64()``
returns one uniformly distributed integer in ``[0, 2**64)``. This module
defines that capability as a Protocol and adapts the generators a Python
program usually already holds. None of the adapters produces randomness of
its own.

Classes:
    U64Source: Protocol for anything with a ``next_u64()`` method.
    RandomSource: Wraps a ``random.Random`` instance.
    SystemSource: OS entropy via ``secrets``.
    CallableSource: Wraps a zero-argument callable.
    ReplaySource: Replays a fixed sequence of draws, counting consumption.

Functions:
    as_source(obj): Coerce a generator-like object into a U64Source.
"""

from __future__ import annotations

import random
import secrets
from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

from boundrand.errors import SourceExhaustedError

__all__ = [
    'CallableSource',
    'RandomSource',
    'ReplaySource',
    'SystemSource',
    'U64Source',
    'as_source',
]


@runtime_checkable
class U64Source(Protocol):
    """Anything that can produce one uniform 64-bit unsigned integer per call."""

    def next_u64(self) -> int:
        """Return the next draw, uniform over [0, 2**64)."""
        ...


class RandomSource:
    """Draws from a ``random.Random`` (Mersenne Twister) instance.

    Args:
        rng: Generator to wrap. A new one is created when omitted.
        seed: Seed for the new generator. Ignored when ``rng`` is given.
    """

    __slots__ = ('_rng',)

    def __init__(self, rng: random.Random | None = None, *, seed: int | str | bytes | None = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def next_u64(self) -> int:
        return self._rng.getrandbits(64)

    def __repr__(self) -> str:
        return f'RandomSource({self._rng!r})'


class SystemSource:
    """Draws from the operating system's entropy pool."""

    __slots__ = ()

    def next_u64(self) -> int:
        return secrets.randbits(64)

    def __repr__(self) -> str:
        return 'SystemSource()'


class CallableSource:
    """Draws by calling a zero-argument function."""

    __slots__ = ('_fn',)

    def __init__(self, fn: Callable[[], int]) -> None:
        self._fn = fn

    def next_u64(self) -> int:
        return self._fn()

    def __repr__(self) -> str:
        return f'CallableSource({self._fn!r})'


class ReplaySource:
    """Replays a fixed sequence of draws.

    Useful wherever the exact draws matter: reproducing a result, or checking
    how many draws a call consumed.

    Example:
        ```python
        src = ReplaySource([0, 2**63 + 1])
        sample(src, 0, 9)   # 5, after rejecting the first draw
        src.consumed        # 2
        ```
    """

    __slots__ = ('_values', 'consumed')

    def __init__(self, values: Iterable[int]) -> None:
        self._values = tuple(values)
        self.consumed = 0

    @property
    def remaining(self) -> int:
        return len(self._values) - self.consumed

    def next_u64(self) -> int:
        if self.consumed >= len(self._values):
            raise SourceExhaustedError(self.consumed)
        value = self._values[self.consumed]
        self.consumed += 1
        return value

    def rewind(self) -> None:
        """Start replaying from the first value again."""
        self.consumed = 0

    def __repr__(self) -> str:
        return f'ReplaySource(consumed={self.consumed}, remaining={self.remaining})'


def as_source(obj: object = None) -> U64Source:
    """Coerce ``obj`` into a U64Source.

    Accepts None (a fresh, randomly seeded RandomSource), an object that
    already has ``next_u64()``, a ``random.Random`` instance, or a
    zero-argument callable returning ints.

    Raises:
        TypeError: If ``obj`` is none of the above.
    """
    if obj is None:
        return RandomSource()
    if isinstance(obj, U64Source):
        return obj
    if isinstance(obj, random.Random):
        return RandomSource(obj)
    if callable(obj):
        return CallableSource(obj)
    msg = f'Cannot use {type(obj).__name__!r} as a source of 64-bit draws'
    raise TypeError(msg)
