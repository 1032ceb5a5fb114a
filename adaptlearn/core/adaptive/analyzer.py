# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning pattern analysis.

Turns raw practice history into a LearningPattern:

- Learning style from the mix of hint and explanation requests
- Preferred hint type from the flags on hint requests
- Attention span from completed session durations
- Error patterns from repeated low-accuracy topics and confusion signals
- Mastery levels blended from stored topic scores and recent accuracy
- Improvement rate from snapshots, or from two session windows
- Struggling and improving areas from stored areas and window trends
- Recommended difficulty from recent accuracy and mean mastery

Sessions, interactions and snapshots are expected newest first. The
analysis is a pure function of its inputs apart from the timestamp.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from adaptlearn.core.adaptive.constants import (
    AnalyzerThresholds,
    AttentionSpan,
    DifficultyBounds,
    HintType,
    InteractionType,
    LearningStyle,
    Subject,
)
from adaptlearn.core.adaptive.defaults import (
    DEFAULT_ATTENTION_SPAN,
    DEFAULT_HINT_TYPE,
    DEFAULT_LEARNING_STYLE,
    completed_durations,
    mean,
    mean_accuracy,
    snapshot_score,
)
from adaptlearn.core.adaptive.models import (
    InteractionRecord,
    LearningPattern,
    ProgressRecord,
    SessionRecord,
    SnapshotRecord,
    snap_difficulty,
)
from adaptlearn.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def dedupe_capped(items: Iterable[str], limit: int) -> list[str]:
    """Remove duplicates keeping first occurrences, then cap the length."""
    return list(dict.fromkeys(items))[:limit]


def topic_accuracy(sessions: Iterable[SessionRecord]) -> dict[str, float]:
    """Pooled accuracy per topic across sessions.

    Each session's totals count towards every topic it covered. Topics
    with no attempted questions are left out.

    Args:
        sessions: Sessions to aggregate.

    Returns:
        Mapping of topic to accuracy in [0, 1].
    """
    totals: dict[str, list[int]] = {}
    for session in sessions:
        for topic in session.topics:
            counts = totals.setdefault(topic, [0, 0])
            counts[0] += session.questions_correct
            counts[1] += session.questions_attempted

    return {
        topic: correct / attempted
        for topic, (correct, attempted) in totals.items()
        if attempted > 0
    }


class LearningPatternAnalyzer:
    """Computes a LearningPattern from a user's practice history.

    Example:
        analyzer = LearningPatternAnalyzer()
        pattern = analyzer.analyze(
            user_id="user-1",
            subject=Subject.MATH,
            sessions=sessions,
            interactions=interactions,
            progress=progress,
            snapshots=snapshots,
        )
    """

    def analyze(
        self,
        user_id: str,
        subject: Subject,
        sessions: Sequence[SessionRecord],
        interactions: Sequence[InteractionRecord],
        progress: ProgressRecord | None = None,
        snapshots: Sequence[SnapshotRecord] = (),
        now: datetime | None = None,
    ) -> LearningPattern:
        """Analyze history into a learning pattern.

        Args:
            user_id: The user being analyzed.
            subject: Subject the history belongs to.
            sessions: Recent sessions, newest first.
            interactions: Recent tutor interactions, newest first.
            progress: Stored progress, None when the user has none.
            snapshots: Recent progress snapshots.
            now: Timestamp for last_analyzed (defaults to current UTC time).

        Returns:
            The computed learning pattern.
        """
        mastery_levels = self.calculate_mastery_levels(sessions, progress)
        struggling, improving = self.identify_performance_areas(sessions, progress)

        pattern = LearningPattern(
            user_id=user_id,
            subject=subject,
            learning_style=self.determine_learning_style(interactions),
            preferred_hint_type=self.analyze_hint_preferences(interactions),
            attention_span=self.analyze_attention_span(sessions),
            error_patterns=self.identify_error_patterns(sessions, interactions),
            mastery_levels=mastery_levels,
            improvement_rate=self.calculate_improvement_rate(snapshots, sessions),
            struggling_areas=struggling,
            improving_areas=improving,
            recommended_difficulty=self.calculate_recommended_difficulty(
                sessions, mastery_levels
            ),
            last_analyzed=now or utc_now(),
        )

        logger.debug(
            "Analyzed %d sessions and %d interactions for user %s (%s): style=%s difficulty=%.1f",
            len(sessions),
            len(interactions),
            user_id,
            subject.value,
            pattern.learning_style.value,
            pattern.recommended_difficulty,
        )
        return pattern

    def determine_learning_style(
        self, interactions: Sequence[InteractionRecord]
    ) -> LearningStyle:
        """Classify learning style from the share of hints and explanations.

        Visual learners cannot be told apart from interaction counts alone,
        so this signal never yields VISUAL.

        Args:
            interactions: Recent tutor interactions.

        Returns:
            ANALYTICAL, TRIAL_AND_ERROR or MIXED.
        """
        total = len(interactions)
        if total < AnalyzerThresholds.MIN_INTERACTIONS_FOR_STYLE:
            return DEFAULT_LEARNING_STYLE

        hints = sum(1 for i in interactions if i.interaction_type == InteractionType.HINT)
        explanations = sum(
            1 for i in interactions if i.interaction_type == InteractionType.EXPLANATION
        )

        if explanations / total > AnalyzerThresholds.STYLE_DOMINANCE_RATIO:
            return LearningStyle.ANALYTICAL
        if hints / total > AnalyzerThresholds.STYLE_DOMINANCE_RATIO:
            return LearningStyle.TRIAL_AND_ERROR
        return LearningStyle.MIXED

    def analyze_hint_preferences(
        self, interactions: Sequence[InteractionRecord]
    ) -> HintType:
        """Infer the hint style from why hints were requested.

        Confusion or a named concept points to conceptual hints; being stuck
        or retrying points to procedural ones. Neither side winning by the
        margin means worked examples.

        Args:
            interactions: Recent tutor interactions.

        Returns:
            Preferred hint type.
        """
        hints = [i for i in interactions if i.interaction_type == InteractionType.HINT]
        if len(hints) < AnalyzerThresholds.MIN_HINTS_FOR_PREFERENCE:
            return DEFAULT_HINT_TYPE

        conceptual = sum(
            1 for h in hints if h.context.is_confused or h.context.concept
        )
        procedural = sum(
            1 for h in hints if h.context.is_stuck or h.context.attempt_count > 1
        )

        margin = AnalyzerThresholds.HINT_PREFERENCE_MARGIN
        if procedural > conceptual * margin:
            return HintType.PROCEDURAL
        if conceptual > procedural * margin:
            return HintType.CONCEPTUAL
        return HintType.EXAMPLE_BASED

    def analyze_attention_span(self, sessions: Sequence[SessionRecord]) -> AttentionSpan:
        """Bucket the mean completed-session duration.

        Args:
            sessions: Recent sessions.

        Returns:
            Attention span bucket.
        """
        durations = completed_durations(sessions)
        if len(durations) < AnalyzerThresholds.MIN_COMPLETED_FOR_ATTENTION:
            return DEFAULT_ATTENTION_SPAN

        average = sum(durations) / len(durations)
        if average < AnalyzerThresholds.SHORT_ATTENTION_MINUTES:
            return AttentionSpan.SHORT
        if average > AnalyzerThresholds.LONG_ATTENTION_MINUTES:
            return AttentionSpan.LONG
        return AttentionSpan.MEDIUM

    def identify_error_patterns(
        self,
        sessions: Sequence[SessionRecord],
        interactions: Sequence[InteractionRecord],
    ) -> list[str]:
        """Tag recurring error signals.

        Args:
            sessions: Recent sessions.
            interactions: Recent tutor interactions.

        Returns:
            Ordered, unique error pattern tags.
        """
        low_accuracy_counts: dict[str, int] = {}
        for session in sessions:
            accuracy = session.accuracy
            if accuracy is None or accuracy >= AnalyzerThresholds.ERROR_ACCURACY_THRESHOLD:
                continue
            for topic in dict.fromkeys(session.topics):
                low_accuracy_counts[topic] = low_accuracy_counts.get(topic, 0) + 1

        patterns = [
            f"frequent_errors_{topic}"
            for topic, count in low_accuracy_counts.items()
            if count >= AnalyzerThresholds.MIN_LOW_ACCURACY_SESSIONS
        ]

        confusion_signals = sum(
            1
            for i in interactions
            if i.context.is_confused or i.context.is_stuck or i.context.is_incorrect
        )
        if confusion_signals > len(sessions) * AnalyzerThresholds.CONFUSION_PER_SESSION:
            patterns.append("high_confusion_rate")

        return patterns

    def calculate_mastery_levels(
        self,
        sessions: Sequence[SessionRecord],
        progress: ProgressRecord | None,
    ) -> dict[str, float]:
        """Blend stored topic scores with recent accuracy.

        Args:
            sessions: Recent sessions.
            progress: Stored progress with percentage topic scores.

        Returns:
            Mapping of topic to mastery in [0, 1].
        """
        levels: dict[str, float] = {}
        if progress is not None:
            for topic, score in progress.topic_scores.items():
                levels[topic] = _clamp_unit(score / 100)

        totals: dict[str, list[int]] = {}
        for session in sessions:
            for topic in session.topics:
                counts = totals.setdefault(topic, [0, 0])
                counts[0] += session.questions_correct
                counts[1] += session.questions_attempted

        for topic, (correct, attempted) in totals.items():
            if attempted < AnalyzerThresholds.MIN_ATTEMPTS_FOR_MASTERY:
                continue
            recent = _clamp_unit(correct / attempted)
            if topic in levels:
                levels[topic] = _clamp_unit(
                    levels[topic] * AnalyzerThresholds.STORED_MASTERY_WEIGHT
                    + recent * AnalyzerThresholds.RECENT_MASTERY_WEIGHT
                )
            else:
                levels[topic] = recent

        return levels

    def calculate_improvement_rate(
        self,
        snapshots: Sequence[SnapshotRecord],
        sessions: Sequence[SessionRecord],
    ) -> float:
        """Relative change in performance over the available horizon.

        Snapshots give the long horizon; without two of them the newest
        session window is compared with the one before it.

        Args:
            snapshots: Recent progress snapshots.
            sessions: Recent sessions, newest first.

        Returns:
            Signed fractional change (0.0 when it cannot be measured).
        """
        if len(snapshots) >= AnalyzerThresholds.MIN_SNAPSHOTS_FOR_TREND:
            ordered = sorted(snapshots, key=lambda s: s.snapshot_date)
            earliest = snapshot_score(ordered[0])
            latest = snapshot_score(ordered[-1])
            if earliest <= 0:
                return 0.0
            return (latest - earliest) / earliest

        if len(sessions) < AnalyzerThresholds.MIN_SESSIONS_FOR_TREND:
            return 0.0

        window = AnalyzerThresholds.TREND_WINDOW
        newer = mean_accuracy(sessions[:window])
        older = mean_accuracy(sessions[window : window * 2])
        if newer is None or not older:
            return 0.0
        return (newer - older) / older

    def identify_performance_areas(
        self,
        sessions: Sequence[SessionRecord],
        progress: ProgressRecord | None,
    ) -> tuple[list[str], list[str]]:
        """Find struggling and improving topics.

        Stored weak areas seed the struggling list. Improving areas come
        only from the trend: stored strong areas are left to the challenge
        tier of the recommender. With enough sessions, the newest window is
        compared topic by topic with the window before it.

        Args:
            sessions: Recent sessions, newest first.
            progress: Stored progress, if any.

        Returns:
            Tuple of (struggling_areas, improving_areas), each unique and capped.
        """
        struggling: list[str] = []
        improving: list[str] = []

        if progress is not None:
            struggling.extend(progress.weak_areas)

        if len(sessions) >= AnalyzerThresholds.MIN_SESSIONS_FOR_TREND:
            window = AnalyzerThresholds.TREND_WINDOW
            recent = topic_accuracy(sessions[:window])
            older = topic_accuracy(sessions[window : window * 2])

            for topic, score in recent.items():
                if score < AnalyzerThresholds.STRUGGLING_ACCURACY:
                    struggling.append(topic)
                elif score > older.get(topic, 0.0) + AnalyzerThresholds.IMPROVEMENT_MARGIN:
                    improving.append(topic)

        cap = AnalyzerThresholds.MAX_AREAS
        return dedupe_capped(struggling, cap), dedupe_capped(improving, cap)

    def calculate_recommended_difficulty(
        self,
        sessions: Sequence[SessionRecord],
        mastery_levels: dict[str, float],
    ) -> float:
        """Recommend a difficulty from recent accuracy and mean mastery.

        Args:
            sessions: Recent sessions, newest first.
            mastery_levels: Per-topic mastery.

        Returns:
            Difficulty in [1, 10] on the 0.5 grid.
        """
        if len(sessions) < AnalyzerThresholds.MIN_SESSIONS_FOR_DIFFICULTY:
            return DifficultyBounds.DEFAULT

        accuracy = mean_accuracy(sessions[: AnalyzerThresholds.TREND_WINDOW])
        difficulty = DifficultyBounds.DEFAULT
        if accuracy is not None:
            if accuracy >= AnalyzerThresholds.EXCELLENT_ACCURACY:
                difficulty = 7.0
            elif accuracy >= AnalyzerThresholds.GOOD_ACCURACY:
                difficulty = 6.0
            elif accuracy < AnalyzerThresholds.POOR_ACCURACY:
                difficulty = 3.0
            elif accuracy < AnalyzerThresholds.WEAK_ACCURACY:
                difficulty = 4.0

        average_mastery = mean(list(mastery_levels.values()))
        if average_mastery is not None:
            if average_mastery > AnalyzerThresholds.HIGH_MASTERY:
                difficulty += 1
            elif average_mastery < AnalyzerThresholds.LOW_MASTERY:
                difficulty -= 1

        return snap_difficulty(difficulty)
