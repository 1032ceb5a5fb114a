# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for adaptlearn.

Example:
    >>> from adaptlearn.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from adaptlearn.core.config.settings import (
    AdaptiveSettings,
    DatabaseSettings,
    RedisSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "AdaptiveSettings",
    "DatabaseSettings",
    "RedisSettings",
    "Settings",
    "clear_settings_cache",
    "get_settings",
]
