# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared models for the adaptive learning engine.

Input records (SessionRecord, InteractionRecord, ProgressRecord,
SnapshotRecord, UserFacts) are read-only copies of what the practice and
tutor subsystems wrote. Output models (LearningPattern,
PersonalizationProfile, DifficultyAdjustment, ContentRecommendation,
LearningInsight) are what the engine hands back to request handlers.

Absent values are always None.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from adaptlearn.core.adaptive.constants import (
    AdaptationType,
    AttentionSpan,
    DifficultyBounds,
    HintType,
    InsightType,
    InteractionType,
    LearningStyle,
    PracticeTime,
    PracticeType,
    Priority,
    Subject,
)
from adaptlearn.core.adaptive.context import InteractionContext, parse_context
from adaptlearn.utils.datetime import ensure_utc, minutes_between, utc_now


def snap_difficulty(value: float) -> float:
    """Round a difficulty to the nearest 0.5 step and clamp it to [1, 10].

    Halves round away from zero, so 4.25 becomes 4.5.

    Args:
        value: Raw difficulty value.

    Returns:
        Difficulty on the 0.5 grid within bounds.
    """
    steps = int(value / DifficultyBounds.STEP + 0.5) if value >= 0 else 0
    snapped = steps * DifficultyBounds.STEP
    return max(DifficultyBounds.MIN, min(DifficultyBounds.MAX, snapped))


# =============================================================================
# History records
# =============================================================================


class SessionRecord(BaseModel):
    """A practice session written by the practice subsystem."""

    id: str
    user_id: str
    subject: Subject
    start_time: datetime
    end_time: datetime | None = None
    questions_attempted: int = Field(default=0, ge=0)
    questions_correct: int = Field(default=0, ge=0)
    topics: list[str] = Field(default_factory=list)
    difficulty_level: float | None = None
    session_data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    @field_validator("start_time", "end_time", "created_at")
    @classmethod
    def _normalize_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def accuracy(self) -> float | None:
        """Fraction of attempted questions answered correctly."""
        if self.questions_attempted == 0:
            return None
        return self.questions_correct / self.questions_attempted

    @property
    def is_completed(self) -> bool:
        """Whether the session has an end time."""
        return self.end_time is not None

    @property
    def duration_minutes(self) -> float | None:
        """Session length in minutes, None while still open."""
        if self.end_time is None:
            return None
        return minutes_between(self.start_time, self.end_time)


class InteractionRecord(BaseModel):
    """An AI tutor interaction (hint, explanation, feedback or chat)."""

    id: str
    user_id: str
    session_id: str | None = None
    interaction_type: InteractionType
    content: str = ""
    context: InteractionContext = Field(default_factory=lambda: parse_context(None))
    created_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _parse_context(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["context"] = parse_context(
                data.get("context"), data.get("interaction_type")
            )
        return data

    @field_validator("created_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ProgressRecord(BaseModel):
    """Aggregate progress for one user and subject."""

    user_id: str
    subject: Subject
    overall_score: float = Field(default=0.0, ge=0.0, le=100.0)
    topic_scores: dict[str, float] = Field(default_factory=dict)
    weak_areas: list[str] = Field(default_factory=list)
    strong_areas: list[str] = Field(default_factory=list)
    streak_days: int = Field(default=0, ge=0)
    total_practice_time: int = Field(default=0, ge=0)
    last_practice_date: date | None = None


class SnapshotRecord(BaseModel):
    """Point-in-time copy of a user's aggregate performance."""

    id: str
    user_id: str
    subject: Subject
    snapshot_date: datetime
    performance_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("snapshot_date")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def overall_score(self) -> float | None:
        """Overall score captured in the snapshot, None if not recorded."""
        value = self.performance_data.get(
            "overall_score", self.performance_data.get("overallScore")
        )
        if value is None:
            return None
        return float(value)


class UserFacts(BaseModel):
    """User facts relevant to goal setting."""

    grade_level: int | None = None
    exam_date: date | None = None


# =============================================================================
# Engine outputs
# =============================================================================


class LearningPattern(BaseModel):
    """Learning pattern computed from a user's history in one subject."""

    user_id: str
    subject: Subject
    learning_style: LearningStyle = LearningStyle.MIXED
    preferred_hint_type: HintType = HintType.CONCEPTUAL
    attention_span: AttentionSpan = AttentionSpan.MEDIUM
    error_patterns: list[str] = Field(default_factory=list)
    mastery_levels: dict[str, float] = Field(default_factory=dict)
    improvement_rate: float = 0.0
    struggling_areas: list[str] = Field(default_factory=list, max_length=5)
    improving_areas: list[str] = Field(default_factory=list, max_length=5)
    recommended_difficulty: float = Field(
        default=DifficultyBounds.DEFAULT,
        ge=DifficultyBounds.MIN,
        le=DifficultyBounds.MAX,
        multiple_of=DifficultyBounds.STEP,
    )
    last_analyzed: datetime = Field(default_factory=utc_now)

    @field_validator("mastery_levels")
    @classmethod
    def _check_mastery(cls, value: dict[str, float]) -> dict[str, float]:
        for topic, level in value.items():
            if not 0.0 <= level <= 1.0:
                raise ValueError(f"mastery for {topic!r} out of range: {level}")
        return value

    @property
    def cache_key(self) -> str:
        """Key identifying this pattern in a pattern store."""
        return pattern_cache_key(self.user_id, self.subject)

    @property
    def average_mastery(self) -> float | None:
        """Mean mastery across topics, None when no topic is known."""
        if not self.mastery_levels:
            return None
        return sum(self.mastery_levels.values()) / len(self.mastery_levels)


def pattern_cache_key(user_id: str, subject: Subject | str) -> str:
    """Build the cache key for a user's pattern in a subject."""
    return f"learning_pattern:{user_id}:{Subject(subject).value}"


class AdaptationRecord(BaseModel):
    """A single adaptation applied to a student's experience."""

    timestamp: datetime = Field(default_factory=utc_now)
    adaptation_type: AdaptationType
    previous_value: Any = None
    new_value: Any = None
    reason: str
    effectiveness: float | None = Field(default=None, ge=0.0, le=1.0)


class PersonalizationProfile(BaseModel):
    """Request-scoped bundle of goals, practice types and scheduling."""

    user_id: str
    subject: Subject
    current_level: int = Field(ge=1, le=10)
    target_level: int = Field(ge=1, le=10)
    learning_goals: list[str] = Field(default_factory=list, max_length=5)
    preferred_practice_types: list[str] = Field(default_factory=list)
    optimal_session_length: int = Field(gt=0)
    best_practice_time: PracticeTime = PracticeTime.AFTERNOON
    motivational_factors: list[str] = Field(default_factory=list)
    adaptation_history: list[AdaptationRecord] = Field(default_factory=list)

    def record_adaptation(self, record: AdaptationRecord) -> None:
        """Append an adaptation to the history.

        History is append-only: earlier records are never modified or
        reordered.

        Args:
            record: Adaptation to append.
        """
        self.adaptation_history.append(record)


class DifficultyAdjustment(BaseModel):
    """Difficulty decision for the next practice session."""

    current_difficulty: float
    recommended_difficulty: float = Field(
        ge=DifficultyBounds.MIN, le=DifficultyBounds.MAX
    )
    adjustment_reason: str
    confidence: float = Field(ge=0.0, le=1.0)


class ContentRecommendation(BaseModel):
    """A ranked practice suggestion."""

    topics: list[str]
    difficulty_level: float = Field(ge=DifficultyBounds.MIN, le=DifficultyBounds.MAX)
    practice_type: PracticeType
    estimated_time: float = Field(ge=0.0, description="Minutes")
    priority: Priority
    reasoning: str


class LearningInsight(BaseModel):
    """Short, actionable observation about a student's learning."""

    insight_type: InsightType
    subject: Subject
    topic: str | None = None
    description: str
    confidence: float = Field(ge=0.0, le=1.0)
    actionable: bool = True
    suggested_actions: list[str] = Field(default_factory=list)
