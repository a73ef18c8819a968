# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across the unit tests:
- A controllable clock so time can be advanced deterministically
- A signal factory stamped with the clock's current time
- Engine and service instances wired to that clock
"""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from eduforge.core.config import ProactiveSettings, clear_settings_cache
from eduforge.core.proactive import (
    BehaviorSignal,
    BehaviorSignalType,
    ProactiveInterventionEngine,
    ProactiveService,
    reset_proactive_service,
)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by timedelta(**kwargs)."""
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock starting at a fixed instant."""
    return FakeClock(datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc))


# =============================================================================
# Proactive Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_singletons() -> Generator[None, None, None]:
    """Keep cached settings and the service singleton out of other tests."""
    clear_settings_cache()
    reset_proactive_service()
    yield
    clear_settings_cache()
    reset_proactive_service()


@pytest.fixture
def proactive_settings() -> ProactiveSettings:
    """Provide default engine settings independent of the environment."""
    return ProactiveSettings(
        buffer_capacity=100,
        lookback_minutes=10,
        cooldown_minutes=5,
    )


@pytest.fixture
def make_signal(clock: FakeClock) -> Callable[..., BehaviorSignal]:
    """Build signals stamped with the clock's current time."""

    def _make(
        signal_type: BehaviorSignalType | str,
        intensity: float = 0.8,
        metadata: dict[str, Any] | None = None,
        timestamp: datetime | None = None,
    ) -> BehaviorSignal:
        return BehaviorSignal(
            type=signal_type,
            intensity=intensity,
            timestamp=timestamp or clock(),
            metadata=metadata or {},
        )

    return _make


@pytest.fixture
def engine(
    proactive_settings: ProactiveSettings,
    clock: FakeClock,
) -> ProactiveInterventionEngine:
    """Provide a fresh engine on the fake clock."""
    return ProactiveInterventionEngine(settings=proactive_settings, clock=clock)


@pytest.fixture
def service(
    proactive_settings: ProactiveSettings,
    clock: FakeClock,
) -> ProactiveService:
    """Provide a fresh service on the fake clock."""
    return ProactiveService(settings=proactive_settings, clock=clock)


@pytest.fixture
def sample_session_id() -> str:
    """Provide a sample session ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"
