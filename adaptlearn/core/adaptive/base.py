# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Abstract collaborators of the adaptive learning engine.

The engine never talks to a database or cache directly. It is handed a
HistoryRepository to read practice history from and a PatternStore to
write computed learning patterns to. Both are owned by the caller, so two
engines in one process never share cache state unless the caller wants
them to.

Repository implementations raise RepositoryError for read failures.
Store implementations raise PersistenceError for write failures.
"""

from abc import ABC, abstractmethod
from typing import Any

from adaptlearn.core.adaptive.constants import Subject
from adaptlearn.core.adaptive.models import (
    InteractionRecord,
    LearningPattern,
    ProgressRecord,
    SessionRecord,
    SnapshotRecord,
    UserFacts,
)


class HistoryRepository(ABC):
    """Read access to a user's practice history."""

    @abstractmethod
    async def get_recent_sessions(
        self, user_id: str, subject: Subject, limit: int
    ) -> list[SessionRecord]:
        """Get the newest sessions for a user in a subject, newest first."""
        ...

    @abstractmethod
    async def get_recent_interactions(
        self, user_id: str, limit: int
    ) -> list[InteractionRecord]:
        """Get the newest tutor interactions for a user, newest first."""
        ...

    @abstractmethod
    async def get_progress(self, user_id: str, subject: Subject) -> ProgressRecord | None:
        """Get the aggregate progress row, None if the user has none."""
        ...

    @abstractmethod
    async def get_snapshots(
        self, user_id: str, subject: Subject, limit: int
    ) -> list[SnapshotRecord]:
        """Get the newest progress snapshots, newest first."""
        ...

    @abstractmethod
    async def get_user_facts(self, user_id: str) -> UserFacts | None:
        """Get grade level and exam date, None for an unknown user."""
        ...

    @abstractmethod
    async def get_user_preferences(self, user_id: str) -> dict[str, Any]:
        """Get the user's opaque preference map."""
        ...


class PatternStore(ABC):
    """Cache sink for computed learning patterns."""

    @abstractmethod
    async def upsert_pattern(self, pattern: LearningPattern) -> None:
        """Insert or replace the cached pattern for its user and subject."""
        ...

    @abstractmethod
    async def get_pattern(self, user_id: str, subject: Subject) -> LearningPattern | None:
        """Get the cached pattern, None if absent or expired."""
        ...
