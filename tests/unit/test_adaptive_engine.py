# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the adaptive learning engine."""

import json
from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from adaptlearn.core.adaptive import (
    AdaptiveLearningEngine,
    InMemoryHistoryRepository,
    InsightType,
    LearningStyle,
    PracticeType,
    Priority,
    ProgressRecord,
    RepositoryError,
    Subject,
    UserFacts,
)
from adaptlearn.core.adaptive.constants import AttentionSpan, HintType
from adaptlearn.infrastructure.cache import InMemoryPatternStore


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def repository() -> InMemoryHistoryRepository:
    """Create an empty in-memory history repository."""
    return InMemoryHistoryRepository()


@pytest.fixture
def pattern_store() -> InMemoryPatternStore:
    """Create an in-memory pattern store."""
    return InMemoryPatternStore()


@pytest.fixture
def engine(repository, pattern_store, test_settings, base_time) -> AdaptiveLearningEngine:
    """Create an engine with a fixed clock."""
    return AdaptiveLearningEngine(
        repository, pattern_store, settings=test_settings, clock=lambda: base_time
    )


@pytest.fixture
def struggling_history(repository, make_session) -> InMemoryHistoryRepository:
    """Three slow sessions around 52% accuracy."""
    repository.add_sessions(
        [
            make_session(attempted=20, correct=10, minutes=60, days_ago=0),
            make_session(attempted=20, correct=11, minutes=60, days_ago=1),
            make_session(attempted=25, correct=13, minutes=60, days_ago=2),
        ]
    )
    return repository


# ============================================================================
# Analyze Tests
# ============================================================================


@pytest.mark.unit
class TestAnalyze:
    """Tests for pattern analysis through the engine."""

    @pytest.mark.asyncio
    async def test_no_history_gives_defaults(self, engine, user_id, base_time) -> None:
        """A user without history gets the default pattern."""
        pattern = await engine.analyze(user_id, Subject.MATH)

        assert pattern.learning_style == LearningStyle.MIXED
        assert pattern.preferred_hint_type == HintType.CONCEPTUAL
        assert pattern.attention_span == AttentionSpan.MEDIUM
        assert pattern.mastery_levels == {}
        assert pattern.struggling_areas == []
        assert pattern.improvement_rate == 0.0
        assert pattern.recommended_difficulty == 5.0
        assert pattern.last_analyzed == base_time

    @pytest.mark.asyncio
    async def test_pattern_is_cached(self, engine, pattern_store, user_id) -> None:
        """The computed pattern is written to the store."""
        pattern = await engine.analyze(user_id, Subject.MATH)

        assert await pattern_store.get_pattern(user_id, Subject.MATH) == pattern

    @pytest.mark.asyncio
    async def test_idempotent(self, engine, struggling_history, user_id) -> None:
        """Analyzing unchanged history twice gives the same pattern."""
        first = await engine.analyze(user_id, Subject.MATH)
        second = await engine.analyze(user_id, Subject.MATH)

        assert first == second

    @pytest.mark.asyncio
    async def test_store_failure_is_swallowed(
        self, repository, test_settings, user_id
    ) -> None:
        """A failing cache write never fails the call."""
        store = AsyncMock()
        store.upsert_pattern.side_effect = ConnectionError("cache down")
        engine = AdaptiveLearningEngine(repository, store, settings=test_settings)

        pattern = await engine.analyze(user_id, Subject.MATH)

        assert pattern.user_id == user_id
        store.upsert_pattern.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_failure_raises(self, engine, repository, user_id) -> None:
        """A failed session fetch surfaces as RepositoryError."""
        repository.get_recent_sessions = AsyncMock(side_effect=TimeoutError("db timeout"))

        with pytest.raises(RepositoryError) as exc_info:
            await engine.analyze(user_id, Subject.MATH)

        assert isinstance(exc_info.value.original_error, TimeoutError)

    @pytest.mark.asyncio
    async def test_repository_error_passes_through(self, engine, repository, user_id) -> None:
        """A RepositoryError from the repository is not wrapped twice."""
        original = RepositoryError("Failed to fetch practice sessions")
        repository.get_recent_sessions = AsyncMock(side_effect=original)

        with pytest.raises(RepositoryError) as exc_info:
            await engine.analyze(user_id, Subject.MATH)

        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_optional_failures_use_defaults(
        self, engine, struggling_history, user_id
    ) -> None:
        """Failing optional fetches are treated as no data."""
        struggling_history.get_recent_interactions = AsyncMock(side_effect=OSError("down"))
        struggling_history.get_progress = AsyncMock(side_effect=OSError("down"))
        struggling_history.get_snapshots = AsyncMock(side_effect=OSError("down"))

        pattern = await engine.analyze(user_id, Subject.MATH)

        assert pattern.learning_style == LearningStyle.MIXED
        assert pattern.mastery_levels["fractions"] == pytest.approx(34 / 65)

    @pytest.mark.asyncio
    async def test_subjects_are_separate(self, engine, repository, make_session, user_id) -> None:
        """History in one subject does not leak into another."""
        repository.add_sessions(
            [make_session(subject=Subject.ENGLISH, topics=["grammar"], days_ago=i) for i in range(3)]
        )

        pattern = await engine.analyze(user_id, Subject.MATH)

        assert pattern.mastery_levels == {}

    @pytest.mark.asyncio
    async def test_json_ready(self, engine, struggling_history, user_id) -> None:
        """Results serialize to JSON with enum values as strings."""
        pattern = await engine.analyze(user_id, Subject.MATH)

        payload = json.loads(pattern.model_dump_json())

        assert payload["subject"] == "math"
        assert payload["learning_style"] == "mixed"


# ============================================================================
# Difficulty Tests
# ============================================================================


@pytest.mark.unit
class TestAdjustDifficulty:
    """Tests for difficulty adjustment through the engine."""

    @pytest.mark.asyncio
    async def test_struggling_student(self, engine, struggling_history, user_id) -> None:
        """Low accuracy at a slow pace drops one level."""
        result = await engine.adjust_difficulty(user_id, Subject.MATH, 5.0)

        assert result.recommended_difficulty == 4.0
        assert result.confidence == 0.9

    @pytest.mark.asyncio
    async def test_insufficient_data(self, engine, repository, make_session, user_id) -> None:
        """Fewer than three sessions keep the current difficulty."""
        repository.add_session(make_session())

        result = await engine.adjust_difficulty(user_id, Subject.MATH, 6.0)

        assert result.recommended_difficulty == 6.0
        assert result.confidence == 0.1

    @pytest.mark.asyncio
    async def test_trial_and_error_penalty(
        self, engine, repository, make_session, make_interaction, user_id
    ) -> None:
        """Hint-heavy learners below 70% lose an extra half level."""
        repository.add_sessions(
            [make_session(attempted=10, correct=6, minutes=10, days_ago=i) for i in range(3)]
        )
        repository.add_interactions([make_interaction(minutes_ago=i) for i in range(10)])

        result = await engine.adjust_difficulty(user_id, Subject.MATH, 5.0)

        assert result.recommended_difficulty == 4.0
        assert "trial-and-error" in result.adjustment_reason


# ============================================================================
# Profile and Recommendation Tests
# ============================================================================


@pytest.mark.unit
class TestProfileAndRecommendations:
    """Tests for profiles and recommendations through the engine."""

    @pytest.mark.asyncio
    async def test_profile_without_facts(self, engine, user_id) -> None:
        """Unknown users get target level 8."""
        profile = await engine.build_profile(user_id, Subject.MATH)

        assert profile.current_level == 1
        assert profile.target_level == 8
        assert profile.optimal_session_length == 25
        assert profile.adaptation_history == []

    @pytest.mark.asyncio
    async def test_profile_with_exam_soon(self, engine, repository, user_id, base_time) -> None:
        """An exam within 30 days raises the target."""
        repository.set_user_facts(
            user_id,
            UserFacts(grade_level=6, exam_date=base_time.date() + timedelta(days=14)),
        )

        profile = await engine.build_profile(user_id, Subject.MATH)

        assert profile.target_level == 9

    @pytest.mark.asyncio
    async def test_profile_when_facts_fail(self, engine, repository, user_id) -> None:
        """A failed facts fetch falls back to target level 8."""
        repository.set_user_facts(user_id, UserFacts(grade_level=4, exam_date=date(2026, 3, 10)))
        repository.get_user_facts = AsyncMock(side_effect=OSError("down"))

        profile = await engine.build_profile(user_id, Subject.MATH)

        assert profile.target_level == 8

    @pytest.mark.asyncio
    async def test_recommend_from_progress(self, engine, repository, user_id) -> None:
        """Weak areas become reviews and strong areas become challenges."""
        repository.set_progress(
            ProgressRecord(
                user_id=user_id,
                subject=Subject.MATH,
                weak_areas=["fractions"],
                strong_areas=["arithmetic"],
            )
        )

        items = await engine.recommend(user_id, Subject.MATH)

        assert [(i.practice_type, i.topics, i.priority) for i in items] == [
            (PracticeType.REVIEW, ["fractions"], Priority.HIGH),
            (PracticeType.CHALLENGE, ["arithmetic"], Priority.LOW),
        ]

    @pytest.mark.asyncio
    async def test_recommend_improving_student(
        self, engine, repository, make_session, user_id
    ) -> None:
        """A strong area is suggested once, as a challenge, beside the trend topic."""
        repository.set_progress(
            ProgressRecord(
                user_id=user_id,
                subject=Subject.MATH,
                weak_areas=["fractions", "geometry"],
                strong_areas=["arithmetic"],
            )
        )
        repository.add_sessions(
            [
                make_session(
                    attempted=10,
                    correct=8 if i < 5 else 5,
                    minutes=30,
                    topics=["algebra"],
                    days_ago=i,
                )
                for i in range(10)
            ]
        )

        items = await engine.recommend(user_id, Subject.MATH)

        assert [(i.practice_type, i.topics, i.estimated_time) for i in items] == [
            (PracticeType.REVIEW, ["fractions"], 12.0),
            (PracticeType.REVIEW, ["geometry"], 12.0),
            (PracticeType.NEW_LEARNING, ["algebra"], 9.0),
            (PracticeType.CHALLENGE, ["arithmetic"], 9.0),
        ]

    @pytest.mark.asyncio
    async def test_recommend_without_progress(self, engine, user_id) -> None:
        """No history means an empty plan."""
        assert await engine.recommend(user_id, Subject.MATH) == []

    @pytest.mark.asyncio
    async def test_recommend_caches_pattern_once(
        self, repository, test_settings, user_id
    ) -> None:
        """The pattern is computed and cached once per recommendation."""
        store = AsyncMock()
        engine = AdaptiveLearningEngine(repository, store, settings=test_settings)

        await engine.recommend(user_id, Subject.MATH)

        store.upsert_pattern.assert_awaited_once()


# ============================================================================
# Insight Tests
# ============================================================================


@pytest.mark.unit
class TestInsights:
    """Tests for insights through the engine."""

    @pytest.mark.asyncio
    async def test_struggling_student_insights(
        self, engine, repository, make_session, user_id
    ) -> None:
        """A struggling student gets a weakness insight first."""
        repository.add_sessions(
            [make_session(attempted=10, correct=5, days_ago=i) for i in range(10)]
        )

        insights = await engine.insights(user_id, Subject.MATH)

        assert insights
        assert (insights[0].insight_type, insights[0].topic) == (
            InsightType.WEAKNESS,
            "fractions",
        )
        assert insights[0].confidence == 0.9
        assert all(i.subject == Subject.MATH for i in insights)

    @pytest.mark.asyncio
    async def test_no_history_no_insights(self, engine, user_id) -> None:
        """A user without history gets no insights."""
        assert await engine.insights(user_id, Subject.MATH) == []
