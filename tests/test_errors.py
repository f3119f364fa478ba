"""Tests for dual struct/exception error types."""

from __future__ import annotations

import msgspec
import pytest
from boundrand import (
    InvalidDraw,
    InvalidDrawError,
    InvalidInterval,
    InvalidIntervalError,
    SourceExhausted,
    SourceExhaustedError,
)


class TestInvalidInterval:
    """Tests for InvalidInterval / InvalidIntervalError."""

    def test_message(self) -> None:
        """str() names the problem."""
        err = InvalidIntervalError(5, 3, 'lo must not exceed hi')
        assert str(err) == 'Invalid interval [5, 3]: lo must not exceed hi'
        assert (err.lo, err.hi, err.reason) == (5, 3, 'lo must not exceed hi')

    def test_is_value_error(self) -> None:
        """Interval errors are ValueErrors."""
        assert issubclass(InvalidIntervalError, ValueError)

    def test_struct_roundtrip(self) -> None:
        """Struct and exception convert into each other."""
        struct = InvalidInterval(5, 3, 'reason')
        assert struct.to_exception().to_struct() == struct

    def test_struct_is_frozen(self) -> None:
        """Error structs cannot be mutated."""
        struct = InvalidInterval(5, 3, 'reason')
        with pytest.raises(AttributeError):
            struct.lo = 0  # type: ignore[misc]

    def test_struct_encodes(self) -> None:
        """Error structs encode to JSON objects."""
        data = msgspec.json.encode(InvalidInterval(0, 2**64 - 1, 'too wide'))
        assert msgspec.json.decode(data) == {'lo': 0, 'hi': 2**64 - 1, 'reason': 'too wide'}


class TestInvalidDraw:
    """Tests for InvalidDraw / InvalidDrawError."""

    def test_message_uses_repr(self) -> None:
        """The offending draw is stored as its repr."""
        err = InvalidDrawError(-1)
        assert err.value == '-1'
        assert 'expected an int in [0, 2**64)' in str(err)

    def test_struct_roundtrip(self) -> None:
        """Struct and exception convert into each other."""
        err = InvalidDrawError(1.5)
        assert err.to_struct() == InvalidDraw('1.5')
        assert err.to_struct().to_exception().value == '1.5'


class TestSourceExhausted:
    """Tests for SourceExhausted / SourceExhaustedError."""

    def test_message(self) -> None:
        """str() names the problem."""
        assert str(SourceExhaustedError(3)) == 'Source exhausted after 3 draws'

    def test_is_runtime_error(self) -> None:
        """Exhaustion is a RuntimeError."""
        assert issubclass(SourceExhaustedError, RuntimeError)

    def test_struct_roundtrip(self) -> None:
        """Struct and exception convert into each other."""
        assert SourceExhausted(3).to_exception().to_struct() == SourceExhausted(3)
