"""Sampler error types: dual struct+exception for data and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'InvalidDraw',
    'InvalidDrawError',
    'InvalidInterval',
    'InvalidIntervalError',
    'SourceExhausted',
    'SourceExhaustedError',
]


# --- Interval Errors ---


class InvalidInterval(msgspec.Struct, frozen=True, gc=False):
    """Interval violates the sampler preconditions - struct variant."""

    lo: int
    hi: int
    reason: str

    def to_exception(self) -> InvalidIntervalError:
        """Convert to exception for raise-based code."""
        return InvalidIntervalError(self.lo, self.hi, self.reason)


class InvalidIntervalError(ValueError):
    """Interval violates the sampler preconditions - exception variant."""

    def __init__(self, lo: int, hi: int, reason: str) -> None:
        self.lo = lo
        self.hi = hi
        self.reason = reason
        super().__init__(f'Invalid interval [{lo}, {hi}]: {reason}')

    def to_struct(self) -> InvalidInterval:
        """Convert to struct for data-oriented code."""
        return InvalidInterval(self.lo, self.hi, self.reason)


# --- Source Errors ---


class InvalidDraw(msgspec.Struct, frozen=True, gc=False):
    """Source produced something other than a 64-bit unsigned integer - struct variant."""

    value: str

    def to_exception(self) -> InvalidDrawError:
        """Convert to exception for raise-based code."""
        return InvalidDrawError(self.value)


class InvalidDrawError(ValueError):
    """Source produced something other than a 64-bit unsigned integer - exception variant."""

    def __init__(self, value: object) -> None:
        self.value = repr(value) if not isinstance(value, str) else value
        super().__init__(f'Source returned {self.value}, expected an int in [0, 2**64)')

    def to_struct(self) -> InvalidDraw:
        """Convert to struct for data-oriented code."""
        return InvalidDraw(self.value)


class SourceExhausted(msgspec.Struct, frozen=True, gc=False):
    """Finite source has no values left - struct variant."""

    consumed: int

    def to_exception(self) -> SourceExhaustedError:
        """Convert to exception for raise-based code."""
        return SourceExhaustedError(self.consumed)


class SourceExhaustedError(RuntimeError):
    """Finite source has no values left - exception variant."""

    def __init__(self, consumed: int) -> None:
        self.consumed = consumed
        super().__init__(f'Source exhausted after {consumed} draws')

    def to_struct(self) -> SourceExhausted:
        """Convert to struct for data-oriented code."""
        return SourceExhausted(self.consumed)
