# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Difficulty adjustment for the next practice session.

Rule table, evaluated top to bottom on the recent window (first match wins):

| Accuracy | Speed (q/min) | Step | Confidence |
|----------|---------------|------|------------|
| >= 0.85  | > 1.5         | +1.0 | 0.8        |
| >= 0.75  | > 1.0         | +0.5 | 0.6        |
| < 0.5    | or < 0.5      | -1.0 | 0.9        |
| < 0.65   |               | -0.5 | 0.7        |
| else     |               |  0.0 | 0.5        |

Trial-and-error learners below 0.7 accuracy get an extra -0.5.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from adaptlearn.core.adaptive.constants import AdjusterThresholds, LearningStyle
from adaptlearn.core.adaptive.defaults import mean, mean_accuracy, session_minutes_or_assumed
from adaptlearn.core.adaptive.models import (
    DifficultyAdjustment,
    LearningPattern,
    SessionRecord,
    snap_difficulty,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdjustmentRule:
    """One row of the adjustment rule table."""

    step: float
    confidence: float
    reason: str


INCREASE = AdjustmentRule(1.0, 0.8, "Excellent accuracy and speed, increasing difficulty")
SLIGHT_INCREASE = AdjustmentRule(0.5, 0.6, "Good accuracy and speed, slightly increasing difficulty")
DECREASE = AdjustmentRule(-1.0, 0.9, "Low accuracy or slow pace, decreasing difficulty")
SLIGHT_DECREASE = AdjustmentRule(-0.5, 0.7, "Accuracy below target, slightly decreasing difficulty")
UNCHANGED = AdjustmentRule(
    0.0,
    AdjusterThresholds.UNCHANGED_CONFIDENCE,
    "Performance within target range, keeping difficulty",
)

INSUFFICIENT_DATA_REASON = "Insufficient data for adjustment"
TRIAL_AND_ERROR_NOTE = "extra reduction for trial-and-error learning style"


class DifficultyAdjuster:
    """Decides the difficulty of the next session from recent performance."""

    def adjust(
        self,
        sessions: Sequence[SessionRecord],
        current_difficulty: float,
        pattern: LearningPattern,
    ) -> DifficultyAdjustment:
        """Recommend a difficulty for the next session.

        Args:
            sessions: The most recent sessions, newest first.
            current_difficulty: Difficulty the student is practicing at.
            pattern: The student's learning pattern.

        Returns:
            Difficulty decision with reason and confidence.
        """
        if len(sessions) < AdjusterThresholds.MIN_SESSIONS:
            return DifficultyAdjustment(
                current_difficulty=current_difficulty,
                recommended_difficulty=snap_difficulty(current_difficulty),
                adjustment_reason=INSUFFICIENT_DATA_REASON,
                confidence=AdjusterThresholds.INSUFFICIENT_DATA_CONFIDENCE,
            )

        accuracy = self.recent_accuracy(sessions)
        speed = self.recent_speed(sessions)
        rule = self.select_rule(accuracy, speed)

        target = current_difficulty + rule.step
        reason = rule.reason
        if (
            pattern.learning_style == LearningStyle.TRIAL_AND_ERROR
            and accuracy < AdjusterThresholds.TRIAL_AND_ERROR_ACCURACY
        ):
            target -= AdjusterThresholds.TRIAL_AND_ERROR_PENALTY
            reason = f"{reason} ({TRIAL_AND_ERROR_NOTE})"

        recommended = snap_difficulty(target)

        logger.debug(
            "Difficulty %.1f -> %.1f (accuracy=%.2f, speed=%.2f)",
            current_difficulty,
            recommended,
            accuracy,
            speed,
        )

        return DifficultyAdjustment(
            current_difficulty=current_difficulty,
            recommended_difficulty=recommended,
            adjustment_reason=reason,
            confidence=rule.confidence,
        )

    def recent_accuracy(self, sessions: Sequence[SessionRecord]) -> float:
        """Mean session accuracy; 0.0 when no session has attempts."""
        accuracy = mean_accuracy(sessions)
        return 0.0 if accuracy is None else accuracy

    def recent_speed(self, sessions: Sequence[SessionRecord]) -> float:
        """Mean questions attempted per minute.

        Open sessions count as the assumed session length.
        """
        speeds = [
            s.questions_attempted / session_minutes_or_assumed(s) for s in sessions
        ]
        return mean(speeds) or 0.0

    def select_rule(self, accuracy: float, speed: float) -> AdjustmentRule:
        """First matching row of the rule table."""
        if (
            accuracy >= AdjusterThresholds.INCREASE_ACCURACY
            and speed > AdjusterThresholds.INCREASE_SPEED
        ):
            return INCREASE
        if (
            accuracy >= AdjusterThresholds.SLIGHT_INCREASE_ACCURACY
            and speed > AdjusterThresholds.SLIGHT_INCREASE_SPEED
        ):
            return SLIGHT_INCREASE
        if (
            accuracy < AdjusterThresholds.DECREASE_ACCURACY
            or speed < AdjusterThresholds.DECREASE_SPEED
        ):
            return DECREASE
        if accuracy < AdjusterThresholds.SLIGHT_DECREASE_ACCURACY:
            return SLIGHT_DECREASE
        return UNCHANGED
