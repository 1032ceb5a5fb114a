# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the SQL history repository.

These tests run against a throwaway SQLite file through aiosqlite.
Run with: pytest tests/integration/test_sql_history_repository.py -v
"""

from collections.abc import AsyncIterator
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from adaptlearn.core.adaptive import (
    AdaptiveLearningEngine,
    InteractionType,
    RepositoryError,
    Subject,
)
from adaptlearn.core.adaptive.context import HintContext
from adaptlearn.core.config.settings import DatabaseSettings, Settings
from adaptlearn.infrastructure.cache import InMemoryPatternStore
from adaptlearn.infrastructure.database import (
    SQLHistoryRepository,
    check_database_connection,
    close_database,
    create_tables,
    get_session,
    init_database,
)
from adaptlearn.infrastructure.database.models import (
    AIInteractionRow,
    PracticeSessionRow,
    ProgressSnapshotRow,
    UserProgressRow,
    UserRow,
)

USER_ID = "550e8400-e29b-41d4-a716-446655440001"
OTHER_USER_ID = "550e8400-e29b-41d4-a716-446655440002"
BASE_TIME = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sqlite_settings(tmp_path: Path) -> Settings:
    """Provide settings pointing at a temporary SQLite database."""
    return Settings(
        debug=False,
        log_level="INFO",
        database=DatabaseSettings(url_override=f"sqlite+aiosqlite:///{tmp_path / 'history.db'}"),
    )


@pytest_asyncio.fixture(scope="function")
async def database(sqlite_settings: Settings) -> AsyncIterator[None]:
    """Initialize a fresh database with two users."""
    await init_database(sqlite_settings)
    await create_tables()

    async with get_session() as session:
        session.add_all(
            [
                UserRow(
                    id=USER_ID,
                    email="student@example.com",
                    grade_level=6,
                    exam_date=date(2026, 3, 20),
                    preferences={"theme": "dark"},
                ),
                UserRow(id=OTHER_USER_ID, email="other@example.com"),
            ]
        )

    yield

    await close_database()


@pytest_asyncio.fixture(scope="function")
async def history(database: None) -> None:
    """Insert practice history for the main user."""
    async with get_session() as session:
        for i in range(12):
            start = BASE_TIME - timedelta(days=i)
            session.add(
                PracticeSessionRow(
                    user_id=USER_ID,
                    subject="math",
                    start_time=start,
                    end_time=start + timedelta(minutes=20),
                    questions_attempted=10,
                    questions_correct=5,
                    topics=["fractions"],
                    difficulty_level=5,
                )
            )
        session.add(
            PracticeSessionRow(
                user_id=USER_ID,
                subject="english",
                start_time=BASE_TIME + timedelta(hours=1),
                questions_attempted=5,
                questions_correct=5,
                topics=["grammar"],
            )
        )
        session.add(
            PracticeSessionRow(
                user_id=OTHER_USER_ID,
                subject="math",
                start_time=BASE_TIME + timedelta(hours=2),
            )
        )
        for i in range(3):
            session.add(
                AIInteractionRow(
                    user_id=USER_ID,
                    interaction_type="hint",
                    content="hint text",
                    context={"helpType": "stuck", "attemptCount": i},
                    created_at=BASE_TIME - timedelta(minutes=i),
                )
            )
        session.add(
            UserProgressRow(
                user_id=USER_ID,
                subject="math",
                overall_score=62.5,
                topic_scores={"fractions": 55.0},
                weak_areas=["fractions"],
                strong_areas=["arithmetic"],
                streak_days=3,
            )
        )
        for i, score in enumerate([70, 60, 50]):
            session.add(
                ProgressSnapshotRow(
                    user_id=USER_ID,
                    subject="math",
                    snapshot_date=date(2026, 3, 2) - timedelta(days=7 * i),
                    performance_data={"overallScore": score},
                )
            )


@pytest.fixture
def repository() -> SQLHistoryRepository:
    """Create a repository over the initialized database."""
    return SQLHistoryRepository()


# ============================================================================
# Repository Read Tests
# ============================================================================


@pytest.mark.integration
class TestSQLHistoryRepository:
    """Tests for SQLHistoryRepository reads."""

    @pytest.mark.asyncio
    async def test_connection_check(self, database) -> None:
        """The initialized database is reachable."""
        assert await check_database_connection() is True

    @pytest.mark.asyncio
    async def test_sessions_newest_first_with_limit(self, history, repository) -> None:
        """Sessions are filtered by user and subject, newest first."""
        sessions = await repository.get_recent_sessions(USER_ID, Subject.MATH, 5)

        assert len(sessions) == 5
        assert all(s.subject == Subject.MATH and s.user_id == USER_ID for s in sessions)
        starts = [s.start_time for s in sessions]
        assert starts == sorted(starts, reverse=True)
        assert starts[0] == BASE_TIME
        assert starts[0].tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_session_mapping(self, history, repository) -> None:
        """Rows map to records with durations and float difficulty."""
        session = (await repository.get_recent_sessions(USER_ID, Subject.MATH, 1))[0]

        assert session.duration_minutes == 20.0
        assert session.accuracy == 0.5
        assert session.topics == ["fractions"]
        assert session.difficulty_level == 5.0

    @pytest.mark.asyncio
    async def test_open_session(self, history, repository) -> None:
        """A session without end time maps to an open record."""
        sessions = await repository.get_recent_sessions(USER_ID, Subject.ENGLISH, 10)

        assert len(sessions) == 1
        assert not sessions[0].is_completed

    @pytest.mark.asyncio
    async def test_interactions_parse_context(self, history, repository) -> None:
        """Interaction context is parsed into its typed shape."""
        interactions = await repository.get_recent_interactions(USER_ID, 2)

        assert len(interactions) == 2
        assert interactions[0].interaction_type == InteractionType.HINT
        assert isinstance(interactions[0].context, HintContext)
        assert interactions[0].context.is_stuck
        assert interactions[0].context.attempt_count == 0

    @pytest.mark.asyncio
    async def test_progress(self, history, repository) -> None:
        """The progress row maps with its areas and scores."""
        progress = await repository.get_progress(USER_ID, Subject.MATH)

        assert progress is not None
        assert progress.overall_score == 62.5
        assert progress.topic_scores == {"fractions": 55.0}
        assert progress.weak_areas == ["fractions"]
        assert progress.streak_days == 3

    @pytest.mark.asyncio
    async def test_missing_progress(self, history, repository) -> None:
        """No progress row means None."""
        assert await repository.get_progress(USER_ID, Subject.ESSAY) is None

    @pytest.mark.asyncio
    async def test_snapshots(self, history, repository) -> None:
        """Snapshot dates are read as UTC midnight, newest first."""
        snapshots = await repository.get_snapshots(USER_ID, Subject.MATH, 2)

        assert [s.snapshot_date for s in snapshots] == [
            datetime(2026, 3, 2, tzinfo=timezone.utc),
            datetime(2026, 2, 23, tzinfo=timezone.utc),
        ]
        assert snapshots[0].overall_score == 70.0

    @pytest.mark.asyncio
    async def test_user_facts_and_preferences(self, history, repository) -> None:
        """User facts and preferences come from the users table."""
        facts = await repository.get_user_facts(USER_ID)

        assert facts is not None
        assert facts.grade_level == 6
        assert facts.exam_date == date(2026, 3, 20)
        assert await repository.get_user_preferences(USER_ID) == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_unknown_user(self, database, repository) -> None:
        """An unknown user has no facts, preferences or history."""
        assert await repository.get_user_facts("missing") is None
        assert await repository.get_user_preferences("missing") == {}
        assert await repository.get_recent_sessions("missing", Subject.MATH, 10) == []

    @pytest.mark.asyncio
    async def test_malformed_row(self, database, repository) -> None:
        """A row that fails validation surfaces as RepositoryError."""
        async with get_session() as session:
            session.add(
                PracticeSessionRow(
                    user_id=USER_ID,
                    subject="math",
                    start_time=BASE_TIME,
                    questions_attempted=-1,
                )
            )

        with pytest.raises(RepositoryError):
            await repository.get_recent_sessions(USER_ID, Subject.MATH, 10)

    @pytest.mark.asyncio
    async def test_uninitialized_database(self) -> None:
        """Reading before init_database() raises RepositoryError."""
        repository = SQLHistoryRepository()

        with pytest.raises(RepositoryError):
            await repository.get_recent_sessions(USER_ID, Subject.MATH, 10)


# ============================================================================
# Engine Over SQL Tests
# ============================================================================


@pytest.mark.integration
class TestEngineOverSQL:
    """End-to-end engine runs over the SQL repository."""

    @pytest.mark.asyncio
    async def test_analyze_and_recommend(self, history, repository, sqlite_settings) -> None:
        """The engine reads SQL history and builds a full plan."""
        store = InMemoryPatternStore()
        engine = AdaptiveLearningEngine(
            repository, store, settings=sqlite_settings, clock=lambda: BASE_TIME
        )

        pattern = await engine.analyze(USER_ID, Subject.MATH)
        profile = await engine.build_profile(USER_ID, Subject.MATH)
        plan = await engine.recommend(USER_ID, Subject.MATH)

        assert pattern.struggling_areas == ["fractions"]
        assert pattern.improving_areas == []
        assert pattern.improvement_rate == pytest.approx(0.4)
        assert await store.get_pattern(USER_ID, Subject.MATH) == pattern
        assert profile.target_level == 9
        assert 1 <= len(plan) <= 5
        assert plan[0].topics == ["fractions"]
