# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Non-critical side effects.

A non-critical side effect (cache write-back, interaction logging) is
awaited inline but can never fail the call that triggered it: any
exception is logged with its traceback and swallowed.
"""

import logging
from collections.abc import Awaitable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_non_critical(
    operation: Awaitable[T],
    description: str,
    **log_context: object,
) -> T | None:
    """Await a side effect, logging and swallowing any failure.

    Args:
        operation: The awaitable to run.
        description: Short name of the side effect for the log line.
        **log_context: Extra identifiers included in the log message.

    Returns:
        The operation's result, or None if it failed.
    """
    try:
        return await operation
    except Exception as e:
        logger.warning(
            "Non-critical side effect failed: %s (%s): %s",
            description,
            ", ".join(f"{key}={value}" for key, value in log_context.items()),
            str(e),
            exc_info=True,
        )
        return None
