"""Pytest configuration and shared fixtures for boundrand tests."""

from __future__ import annotations

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest
from boundrand import ReplaySource, reset_config
from boundrand._logging import clear_log_hooks, reset_logging
from hypothesis import HealthCheck, settings

# clean_config is function-scoped and autouse; it only resets module state
settings.register_profile(
    'boundrand',
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile('boundrand')


@pytest.fixture(autouse=True)
def clean_config() -> Iterator[None]:
    """Run every test against a freshly detected config, unconfigured logging and no log hooks."""
    env = {k: v for k, v in os.environ.items() if not k.startswith('BOUNDRAND_')}
    with patch.dict(os.environ, env, clear=True):
        reset_config()
        reset_logging()
        clear_log_hooks()
        yield
        reset_config()
        reset_logging()
        clear_log_hooks()


@pytest.fixture
def ten_way_rejecting_draws() -> list[int]:
    """Draws for [0, 9]: the first is rejected (l = 0 < 6), the second maps to 5."""
    return [0, 2**63 + 1]


@pytest.fixture
def replay(ten_way_rejecting_draws: list[int]) -> ReplaySource:
    """ReplaySource over ten_way_rejecting_draws."""
    return ReplaySource(ten_way_rejecting_draws)
