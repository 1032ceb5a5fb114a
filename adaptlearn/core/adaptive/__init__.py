# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive learning and personalization.

Components, each a synchronous calculator over fetched history:
- LearningPatternAnalyzer: learning style, mastery, trends, difficulty
- PersonalizationProfileBuilder: levels, goals, session length, schedule
- DifficultyAdjuster: next-session difficulty from recent performance
- ContentRecommender: prioritized practice plan
- LearningInsightGenerator: ranked observations for dashboards

The AdaptiveLearningEngine fetches history through a HistoryRepository,
runs the components and caches patterns in a PatternStore.
"""

from adaptlearn.core.adaptive.analyzer import LearningPatternAnalyzer
from adaptlearn.core.adaptive.base import HistoryRepository, PatternStore
from adaptlearn.core.adaptive.constants import (
    AdaptationType,
    AttentionSpan,
    HintType,
    InsightType,
    InteractionType,
    LearningStyle,
    PracticeTime,
    PracticeType,
    Priority,
    Subject,
)
from adaptlearn.core.adaptive.difficulty import DifficultyAdjuster
from adaptlearn.core.adaptive.engine import AdaptiveLearningEngine
from adaptlearn.core.adaptive.exceptions import (
    AdaptiveEngineError,
    DataUnavailableError,
    PersistenceError,
    RepositoryError,
)
from adaptlearn.core.adaptive.insights import LearningInsightGenerator
from adaptlearn.core.adaptive.models import (
    AdaptationRecord,
    ContentRecommendation,
    DifficultyAdjustment,
    InteractionRecord,
    LearningInsight,
    LearningPattern,
    PersonalizationProfile,
    ProgressRecord,
    SessionRecord,
    SnapshotRecord,
    UserFacts,
)
from adaptlearn.core.adaptive.profile import PersonalizationProfileBuilder
from adaptlearn.core.adaptive.recommender import ContentRecommender
from adaptlearn.core.adaptive.repository import InMemoryHistoryRepository

__all__ = [
    # Engine
    "AdaptiveLearningEngine",
    "ContentRecommender",
    "DifficultyAdjuster",
    "LearningInsightGenerator",
    "LearningPatternAnalyzer",
    "PersonalizationProfileBuilder",
    # Collaborators
    "HistoryRepository",
    "InMemoryHistoryRepository",
    "PatternStore",
    # Models
    "AdaptationRecord",
    "ContentRecommendation",
    "DifficultyAdjustment",
    "InteractionRecord",
    "LearningInsight",
    "LearningPattern",
    "PersonalizationProfile",
    "ProgressRecord",
    "SessionRecord",
    "SnapshotRecord",
    "UserFacts",
    # Enums
    "AdaptationType",
    "AttentionSpan",
    "HintType",
    "InsightType",
    "InteractionType",
    "LearningStyle",
    "PracticeTime",
    "PracticeType",
    "Priority",
    "Subject",
    # Exceptions
    "AdaptiveEngineError",
    "DataUnavailableError",
    "PersistenceError",
    "RepositoryError",
]
