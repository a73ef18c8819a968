# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for EduForge.

Example:
    >>> from eduforge.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from eduforge.core.config.settings import (
    ProactiveSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "ProactiveSettings",
    "get_settings",
    "clear_settings_cache",
]
