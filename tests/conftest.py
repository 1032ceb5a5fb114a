# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

import itertools
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from adaptlearn.core.adaptive.constants import InteractionType, Subject
from adaptlearn.core.adaptive.models import InteractionRecord, SessionRecord
from adaptlearn.core.config.settings import Settings, clear_settings_cache

# Fixed reference time for all generated history (a Monday, 09:00 UTC)
BASE_TIME = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

SessionFactory = Callable[..., SessionRecord]
InteractionFactory = Callable[..., InteractionRecord]


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses SQLite)"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    """Keep cached settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings independent of the host environment."""
    return Settings(environment="development", debug=True, log_level="DEBUG")


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def user_id() -> str:
    """Provide a sample user ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def base_time() -> datetime:
    """Provide the reference time history is generated around."""
    return BASE_TIME


@pytest.fixture
def make_session(user_id: str) -> SessionFactory:
    """Provide a factory for practice sessions.

    Sessions start ``days_ago`` days before the reference time; pass
    ``minutes=None`` for a session that never ended.
    """
    counter = itertools.count(1)

    def _make(
        attempted: int = 10,
        correct: int = 7,
        minutes: float | None = 20,
        topics: tuple[str, ...] | list[str] = ("fractions",),
        days_ago: float = 0,
        start: datetime | None = None,
        subject: Subject = Subject.MATH,
        difficulty: float | None = 5.0,
        **overrides: Any,
    ) -> SessionRecord:
        start_time = start or BASE_TIME - timedelta(days=days_ago)
        end_time = start_time + timedelta(minutes=minutes) if minutes is not None else None
        return SessionRecord(
            id=f"session-{next(counter)}",
            user_id=user_id,
            subject=subject,
            start_time=start_time,
            end_time=end_time,
            questions_attempted=attempted,
            questions_correct=correct,
            topics=list(topics),
            difficulty_level=difficulty,
            **overrides,
        )

    return _make


@pytest.fixture
def make_interaction(user_id: str) -> InteractionFactory:
    """Provide a factory for tutor interactions."""
    counter = itertools.count(1)

    def _make(
        interaction_type: InteractionType = InteractionType.HINT,
        context: dict[str, Any] | None = None,
        minutes_ago: float = 0,
    ) -> InteractionRecord:
        return InteractionRecord.model_validate(
            {
                "id": f"interaction-{next(counter)}",
                "user_id": user_id,
                "interaction_type": interaction_type,
                "content": "tutor message",
                "context": context,
                "created_at": BASE_TIME - timedelta(minutes=minutes_ago),
            }
        )

    return _make
