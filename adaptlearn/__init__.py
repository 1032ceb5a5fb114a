"""adaptlearn.

Adaptive learning and personalization engine: learning pattern analysis,
personalization profiles, difficulty adjustment, content recommendations
and learning insights computed from a student's practice history.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
