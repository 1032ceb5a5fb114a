# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content recommendations.

Produces a short, prioritized practice plan:

- HIGH: review struggling areas one notch below the recommended difficulty
- MEDIUM: new learning in improving areas at the recommended difficulty
- LOW: challenge practice in strong areas one notch above it
"""

import logging

from adaptlearn.core.adaptive.constants import (
    DifficultyBounds,
    PracticeType,
    Priority,
    RecommenderThresholds,
)
from adaptlearn.core.adaptive.models import (
    ContentRecommendation,
    LearningPattern,
    PersonalizationProfile,
    ProgressRecord,
)

logger = logging.getLogger(__name__)


def _estimated_minutes(session_length: int, share: float) -> float:
    return round(session_length * share, 1)


class ContentRecommender:
    """Ranks practice suggestions for a student."""

    def recommend(
        self,
        pattern: LearningPattern,
        profile: PersonalizationProfile,
        progress: ProgressRecord | None,
    ) -> list[ContentRecommendation]:
        """Build recommendations ordered high, medium, then low priority.

        Args:
            pattern: The student's learning pattern.
            profile: Profile supplying the optimal session length.
            progress: Stored progress supplying strong areas, if any.

        Returns:
            At most five recommendations.
        """
        per_tier = RecommenderThresholds.AREAS_PER_PRIORITY
        difficulty = pattern.recommended_difficulty
        length = profile.optimal_session_length

        recommendations = [
            ContentRecommendation(
                topics=[area],
                difficulty_level=max(DifficultyBounds.MIN, difficulty - 1),
                practice_type=PracticeType.REVIEW,
                estimated_time=_estimated_minutes(
                    length, RecommenderThresholds.REVIEW_TIME_SHARE
                ),
                priority=Priority.HIGH,
                reasoning=f"Focused review needed for struggling area: {area}",
            )
            for area in pattern.struggling_areas[:per_tier]
        ]

        recommendations.extend(
            ContentRecommendation(
                topics=[area],
                difficulty_level=difficulty,
                practice_type=PracticeType.NEW_LEARNING,
                estimated_time=_estimated_minutes(
                    length, RecommenderThresholds.NEW_LEARNING_TIME_SHARE
                ),
                priority=Priority.MEDIUM,
                reasoning=f"Build on improvement in: {area}",
            )
            for area in pattern.improving_areas[:per_tier]
        )

        strong_areas = progress.strong_areas if progress is not None else []
        recommendations.extend(
            ContentRecommendation(
                topics=[area],
                difficulty_level=min(DifficultyBounds.MAX, difficulty + 1),
                practice_type=PracticeType.CHALLENGE,
                estimated_time=_estimated_minutes(
                    length, RecommenderThresholds.CHALLENGE_TIME_SHARE
                ),
                priority=Priority.LOW,
                reasoning=f"Challenge practice in strong area to maintain engagement: {area}",
            )
            for area in strong_areas[:per_tier]
        )

        logger.debug(
            "Generated %d recommendations for user %s",
            len(recommendations),
            pattern.user_id,
        )
        return recommendations[: RecommenderThresholds.MAX_RECOMMENDATIONS]
