# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for external service integrations.

This package contains adapters for:
- History database (PostgreSQL, SQLite in tests)
- Learning pattern cache (Redis)
"""
