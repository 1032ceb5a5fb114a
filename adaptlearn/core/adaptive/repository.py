# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory history repository.

Holds practice history in plain dicts. Used by tests and local runs where
no history database is available.

Example:
    repository = InMemoryHistoryRepository()
    repository.add_session(session)
    repository.set_progress(progress)

    engine = AdaptiveLearningEngine(repository, InMemoryPatternStore())
"""

from typing import Any

from adaptlearn.core.adaptive.base import HistoryRepository
from adaptlearn.core.adaptive.constants import Subject
from adaptlearn.core.adaptive.models import (
    InteractionRecord,
    ProgressRecord,
    SessionRecord,
    SnapshotRecord,
    UserFacts,
)


class InMemoryHistoryRepository(HistoryRepository):
    """Dict-backed HistoryRepository.

    Reads return copies ordered newest first, so callers can never mutate
    stored history.
    """

    def __init__(self) -> None:
        self._sessions: list[SessionRecord] = []
        self._interactions: list[InteractionRecord] = []
        self._progress: dict[tuple[str, Subject], ProgressRecord] = {}
        self._snapshots: list[SnapshotRecord] = []
        self._facts: dict[str, UserFacts] = {}
        self._preferences: dict[str, dict[str, Any]] = {}

    # ========== Writers ==========

    def add_session(self, session: SessionRecord) -> None:
        self._sessions.append(session)

    def add_sessions(self, sessions: list[SessionRecord]) -> None:
        self._sessions.extend(sessions)

    def add_interaction(self, interaction: InteractionRecord) -> None:
        self._interactions.append(interaction)

    def add_interactions(self, interactions: list[InteractionRecord]) -> None:
        self._interactions.extend(interactions)

    def set_progress(self, progress: ProgressRecord) -> None:
        self._progress[(progress.user_id, progress.subject)] = progress

    def add_snapshot(self, snapshot: SnapshotRecord) -> None:
        self._snapshots.append(snapshot)

    def set_user_facts(self, user_id: str, facts: UserFacts) -> None:
        self._facts[user_id] = facts

    def set_user_preferences(self, user_id: str, preferences: dict[str, Any]) -> None:
        self._preferences[user_id] = dict(preferences)

    # ========== HistoryRepository ==========

    async def get_recent_sessions(
        self, user_id: str, subject: Subject, limit: int
    ) -> list[SessionRecord]:
        matching = [
            s for s in self._sessions if s.user_id == user_id and s.subject == subject
        ]
        matching.sort(key=lambda s: s.start_time, reverse=True)
        return [s.model_copy(deep=True) for s in matching[:limit]]

    async def get_recent_interactions(
        self, user_id: str, limit: int
    ) -> list[InteractionRecord]:
        matching = [i for i in self._interactions if i.user_id == user_id]
        matching.sort(key=lambda i: i.created_at, reverse=True)
        return [i.model_copy(deep=True) for i in matching[:limit]]

    async def get_progress(self, user_id: str, subject: Subject) -> ProgressRecord | None:
        progress = self._progress.get((user_id, subject))
        return progress.model_copy(deep=True) if progress is not None else None

    async def get_snapshots(
        self, user_id: str, subject: Subject, limit: int
    ) -> list[SnapshotRecord]:
        matching = [
            s for s in self._snapshots if s.user_id == user_id and s.subject == subject
        ]
        matching.sort(key=lambda s: s.snapshot_date, reverse=True)
        return [s.model_copy(deep=True) for s in matching[:limit]]

    async def get_user_facts(self, user_id: str) -> UserFacts | None:
        facts = self._facts.get(user_id)
        return facts.model_copy() if facts is not None else None

    async def get_user_preferences(self, user_id: str) -> dict[str, Any]:
        return dict(self._preferences.get(user_id, {}))
