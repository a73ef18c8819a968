# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for EduForge.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from eduforge.utils.datetime import (
    Clock,
    ensure_utc,
    seconds_to_human,
    utc_now,
)
from eduforge.utils.logging import (
    bind_context,
    bound_context,
    clear_context,
    get_logger,
    setup_logging,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "bound_context",
    "clear_context",
    # Datetime
    "Clock",
    "utc_now",
    "ensure_utc",
    "seconds_to_human",
]
