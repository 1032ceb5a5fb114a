# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive learning engine.

The engine is the single entry point request handlers call. Each operation
fetches the history it needs concurrently, joins the fetches, runs the
synchronous analysis components and returns a JSON-ready pydantic model.

Failure policy:
- Sessions are required: a failed fetch raises RepositoryError.
- Interactions, progress, snapshots and user facts are optional: a failed
  fetch is logged and replaced by the default ("no data").
- Writing the computed pattern to the PatternStore is a non-critical side
  effect: a failure is logged and never fails the call.

Example:
    from adaptlearn.core.adaptive import AdaptiveLearningEngine
    from adaptlearn.infrastructure.cache import InMemoryPatternStore

    engine = AdaptiveLearningEngine(repository, InMemoryPatternStore())
    pattern = await engine.analyze("user-1", Subject.MATH)
    plan = await engine.recommend("user-1", Subject.MATH)
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from adaptlearn.core.adaptive.analyzer import LearningPatternAnalyzer
from adaptlearn.core.adaptive.base import HistoryRepository, PatternStore
from adaptlearn.core.adaptive.constants import Subject
from adaptlearn.core.adaptive.difficulty import DifficultyAdjuster
from adaptlearn.core.adaptive.exceptions import DataUnavailableError, RepositoryError
from adaptlearn.core.adaptive.insights import LearningInsightGenerator
from adaptlearn.core.adaptive.models import (
    ContentRecommendation,
    DifficultyAdjustment,
    LearningInsight,
    LearningPattern,
    PersonalizationProfile,
    ProgressRecord,
    SessionRecord,
    UserFacts,
)
from adaptlearn.core.adaptive.profile import PersonalizationProfileBuilder
from adaptlearn.core.adaptive.recommender import ContentRecommender
from adaptlearn.core.adaptive.side_effects import run_non_critical
from adaptlearn.core.config.settings import Settings, get_settings
from adaptlearn.utils.datetime import utc_now
from adaptlearn.utils.logging import bound_context, get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class AdaptiveLearningEngine:
    """Facade over the adaptive learning components.

    Holds no per-user state. The repository and pattern store are owned
    by the caller, so concurrent calls for the same user only ever race
    on the store, where the last write wins.

    Attributes:
        analyzer: Learning pattern analyzer.
        profile_builder: Personalization profile builder.
        adjuster: Difficulty adjuster.
        recommender: Content recommender.
        insight_generator: Learning insight generator.
    """

    def __init__(
        self,
        repository: HistoryRepository,
        pattern_store: PatternStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the engine.

        Args:
            repository: Source of practice history.
            pattern_store: Sink for computed learning patterns.
            settings: Engine settings (defaults to get_settings()).
            clock: Source of the current UTC time.
        """
        self._repository = repository
        self._pattern_store = pattern_store
        self._windows = (settings or get_settings()).adaptive
        self._clock = clock

        self.analyzer = LearningPatternAnalyzer()
        self.profile_builder = PersonalizationProfileBuilder()
        self.adjuster = DifficultyAdjuster()
        self.recommender = ContentRecommender()
        self.insight_generator = LearningInsightGenerator()

    # ========== Public operations ==========

    async def analyze(self, user_id: str, subject: Subject) -> LearningPattern:
        """Compute the learning pattern for a user in a subject.

        The result is written to the pattern store on a best-effort basis.

        Args:
            user_id: The user to analyze.
            subject: The subject to analyze.

        Returns:
            The freshly computed learning pattern.

        Raises:
            RepositoryError: If the session history cannot be fetched.
        """
        with bound_context(user_id=user_id, subject=subject.value):
            pattern, _ = await self._compute_pattern(user_id, subject)
            return pattern

    async def build_profile(
        self, user_id: str, subject: Subject
    ) -> PersonalizationProfile:
        """Build the personalization profile for a user in a subject.

        Args:
            user_id: The user to profile.
            subject: The subject to profile.

        Returns:
            A profile with an empty adaptation history.

        Raises:
            RepositoryError: If the session history cannot be fetched.
        """
        with bound_context(user_id=user_id, subject=subject.value):
            _, _, profile = await self._compute_profile(user_id, subject)
            logger.info(
                "Personalization profile built",
                current_level=profile.current_level,
                target_level=profile.target_level,
            )
            return profile

    async def adjust_difficulty(
        self,
        user_id: str,
        subject: Subject,
        current_difficulty: float,
    ) -> DifficultyAdjustment:
        """Recommend the difficulty of the user's next session.

        Args:
            user_id: The user practicing.
            subject: The subject being practiced.
            current_difficulty: Difficulty the user is practicing at.

        Returns:
            Difficulty decision with reason and confidence.

        Raises:
            RepositoryError: If the session history cannot be fetched.
        """
        with bound_context(user_id=user_id, subject=subject.value):
            (pattern, _), sessions = await asyncio.gather(
                self._compute_pattern(user_id, subject),
                self._fetch_sessions(user_id, subject, self._windows.difficulty_window),
            )
            adjustment = self.adjuster.adjust(sessions, current_difficulty, pattern)
            logger.info(
                "Difficulty adjusted",
                current_difficulty=adjustment.current_difficulty,
                recommended_difficulty=adjustment.recommended_difficulty,
                confidence=adjustment.confidence,
            )
            return adjustment

    async def recommend(
        self, user_id: str, subject: Subject
    ) -> list[ContentRecommendation]:
        """Recommend practice content for a user in a subject.

        The learning pattern is computed once and shared with the profile.

        Args:
            user_id: The user to recommend for.
            subject: The subject to recommend in.

        Returns:
            At most five recommendations, high priority first.

        Raises:
            RepositoryError: If the session history cannot be fetched.
        """
        with bound_context(user_id=user_id, subject=subject.value):
            pattern, progress, profile = await self._compute_profile(user_id, subject)
            recommendations = self.recommender.recommend(pattern, profile, progress)
            logger.info("Content recommended", count=len(recommendations))
            return recommendations

    async def insights(self, user_id: str, subject: Subject) -> list[LearningInsight]:
        """Generate ranked learning insights for a user in a subject.

        Args:
            user_id: The user to describe.
            subject: The subject to describe.

        Returns:
            Up to eight insights, most confident first.

        Raises:
            RepositoryError: If the session history cannot be fetched.
        """
        with bound_context(user_id=user_id, subject=subject.value):
            (pattern, _), sessions = await asyncio.gather(
                self._compute_pattern(user_id, subject),
                self._fetch_sessions(
                    user_id, subject, self._windows.insight_session_window
                ),
            )
            insights = self.insight_generator.generate(pattern, sessions)
            logger.info("Learning insights generated", count=len(insights))
            return insights

    # ========== Internals ==========

    async def _compute_pattern(
        self, user_id: str, subject: Subject
    ) -> tuple[LearningPattern, ProgressRecord | None]:
        """Fetch analysis inputs, analyze, and cache the pattern.

        Returns:
            Tuple of (pattern, progress) so callers can reuse the progress row.
        """
        sessions, interactions, progress, snapshots = await asyncio.gather(
            self._fetch_sessions(user_id, subject, self._windows.session_window),
            self._fetch_optional(
                self._repository.get_recent_interactions(
                    user_id, self._windows.interaction_window
                ),
                [],
                "interactions",
            ),
            self._fetch_optional(
                self._repository.get_progress(user_id, subject), None, "progress"
            ),
            self._fetch_optional(
                self._repository.get_snapshots(
                    user_id, subject, self._windows.snapshot_window
                ),
                [],
                "snapshots",
            ),
        )

        pattern = self.analyzer.analyze(
            user_id=user_id,
            subject=subject,
            sessions=sessions,
            interactions=interactions,
            progress=progress,
            snapshots=snapshots,
            now=self._clock(),
        )

        await run_non_critical(
            self._pattern_store.upsert_pattern(pattern),
            "learning pattern cache write",
            user_id=user_id,
            subject=subject.value,
        )

        logger.info(
            "Learning pattern analyzed",
            sessions=len(sessions),
            interactions=len(interactions),
            learning_style=pattern.learning_style.value,
            recommended_difficulty=pattern.recommended_difficulty,
        )
        return pattern, progress

    async def _compute_profile(
        self, user_id: str, subject: Subject
    ) -> tuple[LearningPattern, ProgressRecord | None, PersonalizationProfile]:
        """Compute the pattern and build the profile on top of it."""
        (pattern, progress), sessions, facts = await asyncio.gather(
            self._compute_pattern(user_id, subject),
            self._fetch_sessions(user_id, subject, self._windows.profile_session_window),
            self._fetch_user_facts(user_id),
        )
        profile = self.profile_builder.build(
            pattern, sessions, facts, today=self._clock().date()
        )
        return pattern, progress, profile

    async def _fetch_sessions(
        self, user_id: str, subject: Subject, limit: int
    ) -> list[SessionRecord]:
        """Fetch the required session history.

        Raises:
            RepositoryError: If the repository read fails.
        """
        try:
            return await self._repository.get_recent_sessions(user_id, subject, limit)
        except RepositoryError:
            raise
        except Exception as e:
            raise RepositoryError("Failed to fetch practice sessions", e) from e

    async def _fetch_user_facts(self, user_id: str) -> UserFacts | None:
        return await self._fetch_optional(
            self._repository.get_user_facts(user_id), None, "user facts"
        )

    async def _fetch_optional(
        self, fetch: Awaitable[T], default: T, description: str
    ) -> T:
        """Await an optional input, falling back to its default on failure."""
        try:
            return await fetch
        except Exception as e:
            error = DataUnavailableError(f"Could not fetch {description}", e)
            logger.warning("Optional input unavailable, using default", error=str(error))
            return default
