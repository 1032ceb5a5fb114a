# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQL-backed history repository.

Reads practice history from the history database and maps rows to the
engine's pydantic records. Driver errors and malformed rows surface as
RepositoryError; whether that fails a call is up to the engine.

Example:
    await init_database(settings)
    repository = SQLHistoryRepository()
    sessions = await repository.get_recent_sessions("user-1", Subject.MATH, 30)
"""

import logging
from datetime import datetime, time, timezone
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adaptlearn.core.adaptive.base import HistoryRepository
from adaptlearn.core.adaptive.constants import Subject
from adaptlearn.core.adaptive.exceptions import RepositoryError
from adaptlearn.core.adaptive.models import (
    InteractionRecord,
    ProgressRecord,
    SessionRecord,
    SnapshotRecord,
    UserFacts,
)
from adaptlearn.infrastructure.database.connection import DatabaseError, get_sessionmaker
from adaptlearn.infrastructure.database.models import (
    AIInteractionRow,
    PracticeSessionRow,
    ProgressSnapshotRow,
    UserProgressRow,
    UserRow,
)

logger = logging.getLogger(__name__)


def session_from_row(row: PracticeSessionRow) -> SessionRecord:
    """Map a practice_sessions row to a SessionRecord."""
    return SessionRecord(
        id=row.id,
        user_id=row.user_id,
        subject=Subject(row.subject),
        start_time=row.start_time,
        end_time=row.end_time,
        questions_attempted=row.questions_attempted or 0,
        questions_correct=row.questions_correct or 0,
        topics=list(row.topics or []),
        difficulty_level=(
            float(row.difficulty_level) if row.difficulty_level is not None else None
        ),
        session_data=dict(row.session_data or {}),
        created_at=row.created_at,
    )


def interaction_from_row(row: AIInteractionRow) -> InteractionRecord:
    """Map an ai_interactions row to an InteractionRecord."""
    return InteractionRecord(
        id=row.id,
        user_id=row.user_id,
        session_id=row.session_id,
        interaction_type=row.interaction_type,
        content=row.content,
        context=row.context,
        created_at=row.created_at,
    )


def progress_from_row(row: UserProgressRow) -> ProgressRecord:
    """Map a user_progress row to a ProgressRecord."""
    return ProgressRecord(
        user_id=row.user_id,
        subject=Subject(row.subject),
        overall_score=float(row.overall_score or 0),
        topic_scores=dict(row.topic_scores or {}),
        weak_areas=list(row.weak_areas or []),
        strong_areas=list(row.strong_areas or []),
        streak_days=row.streak_days or 0,
        total_practice_time=row.total_practice_time or 0,
        last_practice_date=row.last_practice_date,
    )


def snapshot_from_row(row: ProgressSnapshotRow) -> SnapshotRecord:
    """Map a progress_snapshots row to a SnapshotRecord.

    Snapshot dates are stored as calendar dates and read as UTC midnight.
    """
    return SnapshotRecord(
        id=row.id,
        user_id=row.user_id,
        subject=Subject(row.subject),
        snapshot_date=datetime.combine(row.snapshot_date, time.min, tzinfo=timezone.utc),
        performance_data=dict(row.performance_data or {}),
    )


class SQLHistoryRepository(HistoryRepository):
    """HistoryRepository over the SQLAlchemy history tables."""

    def __init__(
        self, sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None
    ) -> None:
        """Initialize the repository.

        Args:
            sessionmaker: Sessionmaker to read with. Defaults to the one
                created by init_database(), resolved on first use.
        """
        self._sessionmaker = sessionmaker

    def _get_sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            try:
                self._sessionmaker = get_sessionmaker()
            except DatabaseError as e:
                raise RepositoryError("History database unavailable", e) from e
        return self._sessionmaker

    async def _scalars(self, statement: Any, description: str) -> list[Any]:
        """Run a select and return all scalar results.

        Raises:
            RepositoryError: If the query fails.
        """
        try:
            async with self._get_sessionmaker()() as session:
                result = await session.execute(statement)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to read %s: %s", description, str(e))
            raise RepositoryError(f"Failed to read {description}", e) from e

    async def get_recent_sessions(
        self, user_id: str, subject: Subject, limit: int
    ) -> list[SessionRecord]:
        statement = (
            select(PracticeSessionRow)
            .where(
                PracticeSessionRow.user_id == user_id,
                PracticeSessionRow.subject == subject.value,
            )
            .order_by(PracticeSessionRow.start_time.desc())
            .limit(limit)
        )
        rows = await self._scalars(statement, "practice sessions")
        return self._map(rows, session_from_row, "practice session")

    async def get_recent_interactions(
        self, user_id: str, limit: int
    ) -> list[InteractionRecord]:
        statement = (
            select(AIInteractionRow)
            .where(AIInteractionRow.user_id == user_id)
            .order_by(AIInteractionRow.created_at.desc())
            .limit(limit)
        )
        rows = await self._scalars(statement, "tutor interactions")
        return self._map(rows, interaction_from_row, "tutor interaction")

    async def get_progress(self, user_id: str, subject: Subject) -> ProgressRecord | None:
        statement = select(UserProgressRow).where(
            UserProgressRow.user_id == user_id,
            UserProgressRow.subject == subject.value,
        )
        rows = await self._scalars(statement, "user progress")
        if not rows:
            return None
        return self._map(rows[:1], progress_from_row, "user progress")[0]

    async def get_snapshots(
        self, user_id: str, subject: Subject, limit: int
    ) -> list[SnapshotRecord]:
        statement = (
            select(ProgressSnapshotRow)
            .where(
                ProgressSnapshotRow.user_id == user_id,
                ProgressSnapshotRow.subject == subject.value,
            )
            .order_by(ProgressSnapshotRow.snapshot_date.desc())
            .limit(limit)
        )
        rows = await self._scalars(statement, "progress snapshots")
        return self._map(rows, snapshot_from_row, "progress snapshot")

    async def get_user_facts(self, user_id: str) -> UserFacts | None:
        rows = await self._scalars(select(UserRow).where(UserRow.id == user_id), "user")
        if not rows:
            return None
        return UserFacts(grade_level=rows[0].grade_level, exam_date=rows[0].exam_date)

    async def get_user_preferences(self, user_id: str) -> dict[str, Any]:
        rows = await self._scalars(select(UserRow).where(UserRow.id == user_id), "user")
        if not rows:
            return {}
        return dict(rows[0].preferences or {})

    @staticmethod
    def _map(rows: list[Any], mapper: Any, description: str) -> list[Any]:
        """Map rows to records, rejecting rows that do not validate.

        Raises:
            RepositoryError: If a row cannot be mapped.
        """
        try:
            return [mapper(row) for row in rows]
        except (ValidationError, ValueError) as e:
            raise RepositoryError(f"Invalid {description} row", e) from e
