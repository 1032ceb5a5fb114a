# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the practice history tables.

These tables are written by the practice, tutor and progress subsystems
and read by SQLHistoryRepository:

- users: grade level, exam date and preferences
- practice_sessions: one row per practice session
- ai_interactions: hints, explanations, feedback and chat with the tutor
- user_progress: aggregate progress per user and subject
- progress_snapshots: periodic copies of aggregate performance

Identifiers are stored as 36-character UUID strings and list/map columns
as JSON (JSONB on PostgreSQL) so the same models run on SQLite.
"""

import uuid
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from adaptlearn.utils.datetime import utc_now

JSONType = JSON().with_variant(JSONB(), "postgresql")


def _uuid_str() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base for history tables."""


class UserRow(Base):
    """A student account."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(Text)
    last_name: Mapped[Optional[str]] = mapped_column(Text)
    exam_date: Mapped[Optional[date]] = mapped_column(Date)
    grade_level: Mapped[Optional[int]] = mapped_column(Integer)
    preferences: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class PracticeSessionRow(Base):
    """A practice session."""

    __tablename__ = "practice_sessions"
    __table_args__ = (
        Index("ix_practice_sessions_user_subject_start", "user_id", "subject", "start_time"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subject: Mapped[str] = mapped_column(String(20), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    questions_attempted: Mapped[int] = mapped_column(Integer, default=0)
    questions_correct: Mapped[int] = mapped_column(Integer, default=0)
    topics: Mapped[Optional[list[str]]] = mapped_column(JSONType)
    difficulty_level: Mapped[Optional[int]] = mapped_column(Integer)
    session_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class AIInteractionRow(Base):
    """A tutor interaction."""

    __tablename__ = "ai_interactions"
    __table_args__ = (Index("ix_ai_interactions_user_created", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    session_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("practice_sessions.id", ondelete="CASCADE")
    )
    interaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    context: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class UserProgressRow(Base):
    """Aggregate progress for one user and subject."""

    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "subject"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subject: Mapped[str] = mapped_column(String(20), nullable=False)
    overall_score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), default=0)
    topic_scores: Mapped[Optional[dict[str, float]]] = mapped_column(JSONType, default=dict)
    streak_days: Mapped[int] = mapped_column(Integer, default=0)
    total_practice_time: Mapped[int] = mapped_column(Integer, default=0)
    last_practice_date: Mapped[Optional[date]] = mapped_column(Date)
    weak_areas: Mapped[Optional[list[str]]] = mapped_column(JSONType)
    strong_areas: Mapped[Optional[list[str]]] = mapped_column(JSONType)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class ProgressSnapshotRow(Base):
    """A dated copy of aggregate performance."""

    __tablename__ = "progress_snapshots"
    __table_args__ = (UniqueConstraint("user_id", "snapshot_date", "subject"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    snapshot_date: Mapped[date] = mapped_column(Date, nullable=False)
    subject: Mapped[str] = mapped_column(String(20), nullable=False)
    performance_data: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
