# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""History database infrastructure.

This package provides the SQLAlchemy async connection to the history
database, the table models, and the SQL-backed HistoryRepository.

Example:
    from adaptlearn.infrastructure.database import (
        SQLHistoryRepository,
        close_database,
        init_database,
    )

    await init_database(settings)
    repository = SQLHistoryRepository()
    ...
    await close_database()
"""

from adaptlearn.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    create_tables,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)
from adaptlearn.infrastructure.database.history_repository import SQLHistoryRepository

__all__ = [
    "DatabaseError",
    "SQLHistoryRepository",
    "check_database_connection",
    "close_database",
    "create_tables",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
