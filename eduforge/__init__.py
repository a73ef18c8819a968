"""EduForge proactive intervention engine.

Decides whether, what, and how urgently to surface unsolicited
suggestions ("nudges") to a learner from a stream of behavioral signals.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
