# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Default policy for optional and missing history inputs.

Every component resolves missing data through the helpers in this module
instead of inlining its own fallback. The policy:

| Missing input                        | Resolution                          |
|--------------------------------------|-------------------------------------|
| progress record                      | None (no seeds, no stored areas)    |
| snapshots / interactions             | empty list                          |
| session end time, speed calculation  | ASSUMED_SESSION_MINUTES             |
| session end time, duration stats     | session excluded                    |
| session with zero attempts           | excluded from accuracy means        |
| snapshot overall score               | 0.0                                 |
| user facts unavailable               | DEFAULT_TARGET_LEVEL                |
| grade level (facts present)          | DEFAULT_GRADE_LEVEL                 |
| exam date                            | no exam bonus                       |
| difficulty with too little history   | DifficultyBounds.DEFAULT            |
| practice time with too few sessions  | PracticeTime.AFTERNOON              |
"""

from collections.abc import Iterable, Sequence
from fractions import Fraction

from adaptlearn.core.adaptive.constants import (
    AdjusterThresholds,
    AttentionSpan,
    HintType,
    LearningStyle,
    PracticeTime,
)
from adaptlearn.core.adaptive.models import SessionRecord, SnapshotRecord

DEFAULT_LEARNING_STYLE = LearningStyle.MIXED
DEFAULT_HINT_TYPE = HintType.CONCEPTUAL
DEFAULT_ATTENTION_SPAN = AttentionSpan.MEDIUM
DEFAULT_PRACTICE_TIME = PracticeTime.AFTERNOON
DEFAULT_GRADE_LEVEL = 7
DEFAULT_TARGET_LEVEL = 8
DEFAULT_CURRENT_LEVEL = 1
ASSUMED_SESSION_MINUTES = AdjusterThresholds.ASSUMED_DURATION_MINUTES

# Session length defaults by attention span, in minutes
DEFAULT_SESSION_LENGTHS: dict[AttentionSpan, int] = {
    AttentionSpan.SHORT: 15,
    AttentionSpan.MEDIUM: 25,
    AttentionSpan.LONG: 45,
}


def session_minutes_or_assumed(session: SessionRecord) -> float:
    """Duration used for speed: real minutes, or the assumed length if open."""
    duration = session.duration_minutes
    if duration is None:
        return ASSUMED_SESSION_MINUTES
    return max(duration, AdjusterThresholds.MIN_DURATION_MINUTES)


def completed_durations(sessions: Iterable[SessionRecord]) -> list[float]:
    """Durations of completed sessions; open sessions are skipped."""
    return [
        session.duration_minutes
        for session in sessions
        if session.duration_minutes is not None
    ]


def mean_accuracy(sessions: Iterable[SessionRecord]) -> float | None:
    """Mean per-session accuracy, None when no session has attempts.

    Summed as fractions so that equal sessions give their exact accuracy
    (three sessions at 7/10 average to 0.7, not just below it).
    """
    ratios = [
        Fraction(s.questions_correct, s.questions_attempted)
        for s in sessions
        if s.questions_attempted > 0
    ]
    if not ratios:
        return None
    return float(sum(ratios) / len(ratios))


def pooled_accuracy(sessions: Iterable[SessionRecord]) -> float | None:
    """Correct over attempted across sessions, None with no attempts."""
    attempted = 0
    correct = 0
    for session in sessions:
        attempted += session.questions_attempted
        correct += session.questions_correct
    if attempted == 0:
        return None
    return correct / attempted


def snapshot_score(snapshot: SnapshotRecord) -> float:
    """Overall score of a snapshot, 0.0 when it was not recorded."""
    score = snapshot.overall_score
    return 0.0 if score is None else score


def mean(values: Sequence[float]) -> float | None:
    """Arithmetic mean, None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)
