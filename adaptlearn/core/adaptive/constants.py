# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enums and thresholds for the adaptive learning engine.

Every classifier, aggregate and decision rule in the engine reads its
cut-offs from the threshold classes here, so tuning happens in one place.
"""

from enum import Enum


class Subject(str, Enum):
    """Practice subjects tracked by the platform."""

    MATH = "math"
    ENGLISH = "english"
    ESSAY = "essay"


class InteractionType(str, Enum):
    """Kinds of AI tutor interactions."""

    HINT = "hint"
    EXPLANATION = "explanation"
    FEEDBACK = "feedback"
    CHAT = "chat"


class LearningStyle(str, Enum):
    """Coarse classification of how a student engages with help."""

    VISUAL = "visual"
    ANALYTICAL = "analytical"
    TRIAL_AND_ERROR = "trial-and-error"
    MIXED = "mixed"


class HintType(str, Enum):
    """Hint style a student responds to."""

    CONCEPTUAL = "conceptual"
    PROCEDURAL = "procedural"
    EXAMPLE_BASED = "example-based"


class AttentionSpan(str, Enum):
    """Bucket derived from historical session duration."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class PracticeTime(str, Enum):
    """Time-of-day buckets for scheduling."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class PracticeType(str, Enum):
    """Kind of practice a content recommendation asks for."""

    REVIEW = "review"
    NEW_LEARNING = "new_learning"
    CHALLENGE = "challenge"


class Priority(str, Enum):
    """Recommendation priority, ordered high to low."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AdaptationType(str, Enum):
    """What a recorded adaptation changed."""

    DIFFICULTY = "difficulty"
    CONTENT_TYPE = "content_type"
    HINT_STYLE = "hint_style"
    SESSION_LENGTH = "session_length"


class InsightType(str, Enum):
    """Category of a learning insight."""

    STRENGTH = "strength"
    WEAKNESS = "weakness"
    PATTERN = "pattern"
    RECOMMENDATION = "recommendation"


# =============================================================================
# Thresholds
# =============================================================================


class DifficultyBounds:
    """Difficulty scale shared by every component."""

    MIN = 1.0
    MAX = 10.0
    STEP = 0.5
    DEFAULT = 5.0


class AnalyzerThresholds:
    """Thresholds for learning pattern analysis."""

    # Learning style
    MIN_INTERACTIONS_FOR_STYLE = 10
    STYLE_DOMINANCE_RATIO = 0.6

    # Hint preference
    MIN_HINTS_FOR_PREFERENCE = 5
    HINT_PREFERENCE_MARGIN = 1.5

    # Attention span (minutes)
    MIN_COMPLETED_FOR_ATTENTION = 5
    SHORT_ATTENTION_MINUTES = 15
    LONG_ATTENTION_MINUTES = 30

    # Error patterns
    ERROR_ACCURACY_THRESHOLD = 0.6
    MIN_LOW_ACCURACY_SESSIONS = 3
    CONFUSION_PER_SESSION = 2

    # Mastery blending
    MIN_ATTEMPTS_FOR_MASTERY = 5
    STORED_MASTERY_WEIGHT = 0.7
    RECENT_MASTERY_WEIGHT = 0.3

    # Trend windows
    TREND_WINDOW = 5
    MIN_SESSIONS_FOR_TREND = 10
    MIN_SNAPSHOTS_FOR_TREND = 2
    STRUGGLING_ACCURACY = 0.6
    IMPROVEMENT_MARGIN = 0.15
    MAX_AREAS = 5

    # Recommended difficulty
    MIN_SESSIONS_FOR_DIFFICULTY = 3
    EXCELLENT_ACCURACY = 0.85
    GOOD_ACCURACY = 0.75
    POOR_ACCURACY = 0.5
    WEAK_ACCURACY = 0.65
    HIGH_MASTERY = 0.8
    LOW_MASTERY = 0.5


class AdjusterThresholds:
    """Thresholds for difficulty adjustment decisions."""

    MIN_SESSIONS = 3
    INCREASE_ACCURACY = 0.85
    INCREASE_SPEED = 1.5
    SLIGHT_INCREASE_ACCURACY = 0.75
    SLIGHT_INCREASE_SPEED = 1.0
    DECREASE_ACCURACY = 0.5
    DECREASE_SPEED = 0.5
    SLIGHT_DECREASE_ACCURACY = 0.65
    ASSUMED_DURATION_MINUTES = 30.0
    MIN_DURATION_MINUTES = 0.1
    TRIAL_AND_ERROR_ACCURACY = 0.7
    TRIAL_AND_ERROR_PENALTY = 0.5
    INSUFFICIENT_DATA_CONFIDENCE = 0.1
    UNCHANGED_CONFIDENCE = 0.5


class ProfileThresholds:
    """Thresholds for personalization profile building."""

    GRADE_TARGET_OFFSET = 2
    EXAM_SOON_DAYS = 30
    GOAL_ACCURACY_PERCENT = 75
    SLOW_IMPROVEMENT_RATE = 0.1
    MAX_GOALS = 5

    MIN_SESSIONS_FOR_LENGTH = 5
    SHORT_SESSION_MINUTES = 20
    LONG_SESSION_MINUTES = 30
    DURATION_ACCURACY_MARGIN = 0.1

    MIN_SESSIONS_FOR_TIME = 10
    MIN_SESSIONS_PER_TIME_BUCKET = 3
    MORNING_END_HOUR = 12
    AFTERNOON_END_HOUR = 18

    EXTENDED_PRACTICE_MINUTES = 30
    QUICK_PRACTICE_MINUTES = 15
    CONSISTENCY_WINDOW = 10
    CONSISTENT_DAYS = 7


class RecommenderThresholds:
    """Limits and time shares for content recommendations."""

    AREAS_PER_PRIORITY = 2
    MAX_RECOMMENDATIONS = 5
    REVIEW_TIME_SHARE = 0.4
    NEW_LEARNING_TIME_SHARE = 0.3
    CHALLENGE_TIME_SHARE = 0.3


class InsightThresholds:
    """Thresholds for learning insights."""

    POSITIVE_TREND = 0.1
    NEGATIVE_TREND = -0.05
    MIN_SESSIONS = 5
    READY_ACCURACY = 0.85
    FUNDAMENTALS_ACCURACY = 0.6
    MAX_INSIGHTS = 8


# Practice type catalogue keyed by learning style and attention span
STYLE_PRACTICE_TYPES: dict[LearningStyle, tuple[str, ...]] = {
    LearningStyle.VISUAL: ("diagram_problems", "visual_explanations"),
    LearningStyle.ANALYTICAL: ("step_by_step_solutions", "concept_explanations"),
    LearningStyle.TRIAL_AND_ERROR: ("practice_drills", "immediate_feedback"),
    LearningStyle.MIXED: ("mixed_practice", "adaptive_content"),
}

ATTENTION_PRACTICE_TYPES: dict[AttentionSpan, tuple[str, ...]] = {
    AttentionSpan.SHORT: ("quick_sessions", "bite_sized_problems"),
    AttentionSpan.MEDIUM: (),
    AttentionSpan.LONG: ("comprehensive_sessions", "complex_problems"),
}

BASELINE_MOTIVATIONAL_FACTORS: tuple[str, ...] = (
    "progress_tracking",
    "achievement_badges",
    "exam_preparation",
)
