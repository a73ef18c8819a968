# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for EduForge.

This package contains the core business logic:
- config: Application configuration and settings
- proactive: Behavioral signal buffering, detectors and nudge lifecycle
"""
