# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Personalization profile building.

Combines a LearningPattern with recent sessions and user facts into a
PersonalizationProfile: current and target levels, goals, preferred
practice types, session length, best practice time and motivators.
"""

import logging
import math
from collections.abc import Sequence
from datetime import date

from adaptlearn.core.adaptive.constants import (
    ATTENTION_PRACTICE_TYPES,
    BASELINE_MOTIVATIONAL_FACTORS,
    STYLE_PRACTICE_TYPES,
    PracticeTime,
    ProfileThresholds,
)
from adaptlearn.core.adaptive.defaults import (
    DEFAULT_CURRENT_LEVEL,
    DEFAULT_GRADE_LEVEL,
    DEFAULT_PRACTICE_TIME,
    DEFAULT_SESSION_LENGTHS,
    DEFAULT_TARGET_LEVEL,
    completed_durations,
    mean,
    mean_accuracy,
    pooled_accuracy,
)
from adaptlearn.core.adaptive.models import (
    LearningPattern,
    PersonalizationProfile,
    SessionRecord,
    UserFacts,
)
from adaptlearn.utils.datetime import days_until

logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 10


def _clamp_level(value: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, value))


class PersonalizationProfileBuilder:
    """Builds request-scoped personalization profiles.

    Example:
        builder = PersonalizationProfileBuilder()
        profile = builder.build(pattern, sessions, facts)
    """

    def build(
        self,
        pattern: LearningPattern,
        sessions: Sequence[SessionRecord],
        user_facts: UserFacts | None,
        today: date | None = None,
    ) -> PersonalizationProfile:
        """Build a profile for the pattern's user and subject.

        Args:
            pattern: Freshly computed learning pattern.
            sessions: Recent sessions, newest first.
            user_facts: Grade level and exam date, None if unavailable.
            today: Reference date for exam proximity (defaults to UTC today).

        Returns:
            The personalization profile, with an empty adaptation history.
        """
        target_level = self.calculate_target_level(user_facts, today)

        profile = PersonalizationProfile(
            user_id=pattern.user_id,
            subject=pattern.subject,
            current_level=self.calculate_current_level(pattern),
            target_level=target_level,
            learning_goals=self.generate_learning_goals(pattern, target_level),
            preferred_practice_types=self.select_practice_types(pattern),
            optimal_session_length=self.calculate_optimal_session_length(
                pattern, sessions
            ),
            best_practice_time=self.determine_best_practice_time(sessions),
            motivational_factors=self.identify_motivational_factors(sessions),
        )

        logger.debug(
            "Built profile for user %s (%s): level %d -> %d, %d goals",
            pattern.user_id,
            pattern.subject.value,
            profile.current_level,
            profile.target_level,
            len(profile.learning_goals),
        )
        return profile

    def calculate_current_level(self, pattern: LearningPattern) -> int:
        """Ceiling of ten times mean mastery, 1 when nothing is mastered yet."""
        average = pattern.average_mastery
        if average is None:
            return DEFAULT_CURRENT_LEVEL
        return _clamp_level(math.ceil(average * 10))

    def calculate_target_level(
        self, user_facts: UserFacts | None, today: date | None = None
    ) -> int:
        """Target level from grade, with a bump for an exam within 30 days.

        Args:
            user_facts: User facts, None if they could not be fetched.
            today: Reference date for exam proximity.

        Returns:
            Target level in [1, 10].
        """
        if user_facts is None:
            return DEFAULT_TARGET_LEVEL

        grade = user_facts.grade_level
        if grade is None:
            grade = DEFAULT_GRADE_LEVEL
        target = grade + ProfileThresholds.GRADE_TARGET_OFFSET

        if user_facts.exam_date is not None:
            remaining = days_until(user_facts.exam_date, today)
            if 0 <= remaining < ProfileThresholds.EXAM_SOON_DAYS:
                target += 1

        return _clamp_level(target)

    def generate_learning_goals(
        self, pattern: LearningPattern, target_level: int
    ) -> list[str]:
        """Derive up to five goals from struggles, level gap and trend."""
        goals = [
            f"Improve performance in {area} to "
            f"{ProfileThresholds.GOAL_ACCURACY_PERCENT}% accuracy"
            for area in pattern.struggling_areas
        ]

        if pattern.recommended_difficulty < target_level:
            goals.append(f"Reach difficulty level {target_level}")

        if pattern.improvement_rate < ProfileThresholds.SLOW_IMPROVEMENT_RATE:
            goals.append("Increase learning consistency and improvement rate")

        return goals[: ProfileThresholds.MAX_GOALS]

    def select_practice_types(self, pattern: LearningPattern) -> list[str]:
        """Practice types for the learning style plus attention span add-ons."""
        return [
            *STYLE_PRACTICE_TYPES[pattern.learning_style],
            *ATTENTION_PRACTICE_TYPES[pattern.attention_span],
        ]

    def calculate_optimal_session_length(
        self, pattern: LearningPattern, sessions: Sequence[SessionRecord]
    ) -> int:
        """Recommend a session length in whole minutes.

        Starts from the mean completed duration. When short sessions
        (under 20 minutes) are clearly more accurate than long ones (over
        30 minutes) the length is pulled down to at most 20, and in the
        opposite case pushed up to at least 30.

        Args:
            pattern: Learning pattern supplying the attention span fallback.
            sessions: Recent sessions.

        Returns:
            Session length in minutes, at least 1.
        """
        durations = completed_durations(sessions)
        if len(sessions) < ProfileThresholds.MIN_SESSIONS_FOR_LENGTH or not durations:
            return DEFAULT_SESSION_LENGTHS[pattern.attention_span]

        length = sum(durations) / len(durations)

        completed = [s for s in sessions if s.duration_minutes is not None]
        short_accuracy = mean_accuracy(
            s for s in completed if s.duration_minutes < ProfileThresholds.SHORT_SESSION_MINUTES
        )
        long_accuracy = mean_accuracy(
            s for s in completed if s.duration_minutes > ProfileThresholds.LONG_SESSION_MINUTES
        )

        if short_accuracy is not None and long_accuracy is not None:
            margin = ProfileThresholds.DURATION_ACCURACY_MARGIN
            if short_accuracy > long_accuracy + margin:
                length = min(ProfileThresholds.SHORT_SESSION_MINUTES, length)
            elif long_accuracy > short_accuracy + margin:
                length = max(ProfileThresholds.LONG_SESSION_MINUTES, length)

        return max(1, round(length))

    def determine_best_practice_time(
        self, sessions: Sequence[SessionRecord]
    ) -> PracticeTime:
        """Pick the time of day with the best accuracy.

        Sessions are bucketed by their UTC start hour. Only buckets with at
        least three sessions compete, scored on correct over attempted across
        the whole bucket. Ties go to the earlier bucket.

        Args:
            sessions: Recent sessions.

        Returns:
            Best practice time, afternoon without enough history.
        """
        if len(sessions) < ProfileThresholds.MIN_SESSIONS_FOR_TIME:
            return DEFAULT_PRACTICE_TIME

        buckets: dict[PracticeTime, list[SessionRecord]] = {
            PracticeTime.MORNING: [],
            PracticeTime.AFTERNOON: [],
            PracticeTime.EVENING: [],
        }
        for session in sessions:
            hour = session.start_time.hour
            if hour < ProfileThresholds.MORNING_END_HOUR:
                buckets[PracticeTime.MORNING].append(session)
            elif hour < ProfileThresholds.AFTERNOON_END_HOUR:
                buckets[PracticeTime.AFTERNOON].append(session)
            else:
                buckets[PracticeTime.EVENING].append(session)

        best_time = DEFAULT_PRACTICE_TIME
        best_accuracy: float | None = None
        for practice_time, bucket in buckets.items():
            if len(bucket) < ProfileThresholds.MIN_SESSIONS_PER_TIME_BUCKET:
                continue
            accuracy = pooled_accuracy(bucket)
            if accuracy is None:
                continue
            if best_accuracy is None or accuracy > best_accuracy:
                best_time = practice_time
                best_accuracy = accuracy

        return best_time

    def identify_motivational_factors(
        self, sessions: Sequence[SessionRecord]
    ) -> list[str]:
        """Motivators inferred from session habits, plus the baseline set."""
        factors: list[str] = []

        average_length = mean(completed_durations(sessions))
        if average_length is not None:
            if average_length > ProfileThresholds.EXTENDED_PRACTICE_MINUTES:
                factors.append("enjoys_extended_practice")
            elif average_length < ProfileThresholds.QUICK_PRACTICE_MINUTES:
                factors.append("prefers_quick_sessions")

        recent_days = {
            s.start_time.date() for s in sessions[: ProfileThresholds.CONSISTENCY_WINDOW]
        }
        if len(recent_days) >= ProfileThresholds.CONSISTENT_DAYS:
            factors.append("consistent_daily_practice")

        factors.extend(BASELINE_MOTIVATIONAL_FACTORS)
        return factors
