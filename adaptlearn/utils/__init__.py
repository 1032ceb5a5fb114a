# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for adaptlearn.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from adaptlearn.utils.datetime import (
    days_until,
    ensure_utc,
    minutes_between,
    utc_now,
)
from adaptlearn.utils.logging import bound_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bound_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "minutes_between",
    "days_until",
]
