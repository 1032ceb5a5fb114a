# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for adaptlearn.

This package contains the engine logic and shared configuration:
- config: Engine configuration and settings
- adaptive: Learning pattern analysis and personalization
"""
