# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for adaptive models and interaction context parsing."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from adaptlearn.core.adaptive.constants import InteractionType, Subject
from adaptlearn.core.adaptive.context import (
    ChatContext,
    ExplanationContext,
    FeedbackContext,
    HintContext,
    OtherContext,
    parse_context,
)
from adaptlearn.core.adaptive.defaults import (
    completed_durations,
    mean_accuracy,
    pooled_accuracy,
    session_minutes_or_assumed,
)
from adaptlearn.core.adaptive.models import (
    InteractionRecord,
    LearningPattern,
    SessionRecord,
    SnapshotRecord,
    pattern_cache_key,
)


# ============================================================================
# Context Parsing Tests
# ============================================================================


@pytest.mark.unit
class TestParseContext:
    """Tests for interaction context parsing."""

    def test_hint_from_camel_case(self) -> None:
        """Tutor camelCase keys map onto the hint shape."""
        context = parse_context(
            {"helpType": "stuck", "concept": "ratios", "attemptCount": 2},
            InteractionType.HINT,
        )

        assert isinstance(context, HintContext)
        assert context.is_stuck
        assert not context.is_confused
        assert context.concept == "ratios"
        assert context.attempt_count == 2

    def test_snake_case_accepted(self) -> None:
        """snake_case keys are accepted too."""
        context = parse_context({"help_type": "confused"}, "hint")

        assert context.is_confused

    def test_type_picks_shape(self) -> None:
        """Without a kind, the interaction type picks the shape."""
        assert isinstance(parse_context({}, InteractionType.EXPLANATION), ExplanationContext)
        assert isinstance(parse_context({}, InteractionType.FEEDBACK), FeedbackContext)
        assert isinstance(parse_context({}, InteractionType.CHAT), ChatContext)

    def test_explicit_kind_wins(self) -> None:
        """An explicit kind overrides the interaction type."""
        context = parse_context({"kind": "chat", "topic": "ratios"}, InteractionType.HINT)

        assert isinstance(context, ChatContext)
        assert context.topic == "ratios"

    def test_unknown_kind_is_other(self) -> None:
        """Unknown kinds keep the raw payload."""
        context = parse_context({"kind": "voice", "pitch": 3})

        assert isinstance(context, OtherContext)
        assert context.data == {"kind": "voice", "pitch": 3}
        assert not context.is_confused
        assert context.attempt_count == 0

    def test_invalid_payload_is_other(self) -> None:
        """A payload that fails validation falls back to other."""
        context = parse_context({"attemptCount": -4}, InteractionType.HINT)

        assert isinstance(context, OtherContext)
        assert context.data == {"attemptCount": -4}

    def test_non_dict_is_empty_other(self) -> None:
        """Missing or non-map payloads become an empty other context."""
        assert parse_context(None) == OtherContext()
        assert parse_context("free text") == OtherContext()

    def test_incorrect_flag(self) -> None:
        """Every known shape exposes the incorrect flag."""
        for interaction_type in InteractionType:
            context = parse_context({"isIncorrect": True}, interaction_type)
            assert context.is_incorrect


# ============================================================================
# Record Tests
# ============================================================================


@pytest.mark.unit
class TestRecords:
    """Tests for history records."""

    def test_interaction_record_parses_context(self, user_id, base_time) -> None:
        """Raw context is parsed at the record boundary."""
        record = InteractionRecord.model_validate(
            {
                "id": "i-1",
                "user_id": user_id,
                "interaction_type": "hint",
                "context": {"helpType": "stuck"},
                "created_at": base_time,
            }
        )

        assert isinstance(record.context, HintContext)
        assert record.context.is_stuck

    def test_interaction_record_without_context(self, user_id, base_time) -> None:
        """A null context becomes an empty other context."""
        record = InteractionRecord(
            id="i-1",
            user_id=user_id,
            interaction_type=InteractionType.CHAT,
            created_at=base_time,
        )

        assert isinstance(record.context, OtherContext)

    def test_naive_datetimes_become_utc(self, user_id) -> None:
        """Naive timestamps are read as UTC."""
        session = SessionRecord(
            id="s-1",
            user_id=user_id,
            subject=Subject.MATH,
            start_time=datetime(2026, 3, 2, 9, 0),
            end_time=datetime(2026, 3, 2, 9, 30),
        )

        assert session.start_time.tzinfo == timezone.utc
        assert session.duration_minutes == 30.0

    def test_session_accuracy(self, make_session) -> None:
        """Accuracy is None without attempts."""
        assert make_session(attempted=8, correct=6).accuracy == 0.75
        assert make_session(attempted=0, correct=0).accuracy is None

    def test_open_session(self, make_session) -> None:
        """A session without end time is open and has no duration."""
        session = make_session(minutes=None)

        assert not session.is_completed
        assert session.duration_minutes is None

    def test_snapshot_score_keys(self, user_id, base_time) -> None:
        """Both snake_case and camelCase score keys are read."""
        snake = SnapshotRecord(
            id="a",
            user_id=user_id,
            subject=Subject.MATH,
            snapshot_date=base_time,
            performance_data={"overall_score": 70},
        )
        camel = snake.model_copy(update={"performance_data": {"overallScore": "65.5"}})
        empty = snake.model_copy(update={"performance_data": {}})

        assert snake.overall_score == 70.0
        assert camel.overall_score == 65.5
        assert empty.overall_score is None


# ============================================================================
# Default Policy Tests
# ============================================================================


@pytest.mark.unit
class TestDefaultPolicy:
    """Tests for the shared default helpers."""

    def test_assumed_minutes_for_open_session(self, make_session) -> None:
        """Open sessions count as 30 minutes for speed."""
        assert session_minutes_or_assumed(make_session(minutes=None)) == 30.0

    def test_zero_length_session_floored(self, make_session) -> None:
        """Zero-length sessions are floored to avoid division by zero."""
        assert session_minutes_or_assumed(make_session(minutes=0)) == 0.1

    def test_completed_durations_skip_open(self, make_session) -> None:
        """Open sessions are excluded from duration statistics."""
        sessions = [make_session(minutes=10), make_session(minutes=None)]

        assert completed_durations(sessions) == [10.0]

    def test_mean_and_pooled_accuracy(self, make_session) -> None:
        """Mean accuracy averages sessions; pooled accuracy sums questions."""
        sessions = [
            make_session(attempted=10, correct=10),
            make_session(attempted=30, correct=15),
            make_session(attempted=0, correct=0),
        ]

        assert mean_accuracy(sessions) == pytest.approx(0.75)
        assert pooled_accuracy(sessions) == pytest.approx(25 / 40)
        assert mean_accuracy([]) is None
        assert pooled_accuracy([]) is None

    def test_mean_accuracy_of_equal_sessions_is_exact(self, make_session) -> None:
        """Equal sessions average to exactly their own accuracy."""
        sessions = [make_session(attempted=10, correct=7) for _ in range(3)]

        assert mean_accuracy(sessions) == 0.7


# ============================================================================
# Pattern Tests
# ============================================================================


@pytest.mark.unit
class TestLearningPattern:
    """Tests for the learning pattern model."""

    def test_cache_key(self, user_id) -> None:
        """Patterns are keyed by user and subject."""
        pattern = LearningPattern(user_id=user_id, subject=Subject.ENGLISH)

        assert pattern.cache_key == f"learning_pattern:{user_id}:english"
        assert pattern_cache_key(user_id, "english") == pattern.cache_key

    def test_rejects_off_grid_difficulty(self, user_id) -> None:
        """Recommended difficulty must be on the 0.5 grid."""
        with pytest.raises(ValidationError):
            LearningPattern(user_id=user_id, subject=Subject.MATH, recommended_difficulty=5.3)

    def test_rejects_mastery_out_of_range(self, user_id) -> None:
        """Mastery levels must be within [0, 1]."""
        with pytest.raises(ValidationError):
            LearningPattern(user_id=user_id, subject=Subject.MATH, mastery_levels={"a": 1.2})

    def test_rejects_too_many_areas(self, user_id) -> None:
        """At most five struggling areas."""
        with pytest.raises(ValidationError):
            LearningPattern(
                user_id=user_id,
                subject=Subject.MATH,
                struggling_areas=["a", "b", "c", "d", "e", "f"],
            )

    def test_json_round_trip(self, user_id, base_time) -> None:
        """Patterns survive JSON serialization unchanged."""
        pattern = LearningPattern(
            user_id=user_id,
            subject=Subject.MATH,
            mastery_levels={"fractions": 0.4},
            last_analyzed=base_time + timedelta(minutes=5),
        )

        assert LearningPattern.model_validate_json(pattern.model_dump_json()) == pattern
