# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Proactive intervention engine for EduForge.

Unlike a tutor that only answers when asked, this package decides on
its own when to surface a suggestion ("nudge") to a learner, based on a
stream of behavioral signals computed upstream.

Key Components:
- SignalBuffer: Bounded, time-windowed store of recent signals
- Detectors: Nine pure rules, each proposing a candidate nudge
- Arbiter: First detector in precedence order wins
- CooldownGate: Minimum gap between two emitted nudges
- ProactiveInterventionEngine: One per session; tracks nudge lifecycle
- ProactiveService: Owns one engine per session behind a per-session lock

Usage:
    from eduforge.core.proactive import (
        BehaviorSignal,
        BehaviorSignalType,
        ProactiveInterventionEngine,
    )

    engine = ProactiveInterventionEngine()
    nudge = engine.record_signal(
        BehaviorSignal(
            type=BehaviorSignalType.STREAK_AT_RISK,
            intensity=0.8,
            metadata={"currentStreak": 10},
        )
    )
    # nudge.message == "Your 10-day streak is at risk!"

Defaults (see ProactiveSettings):
- Buffer capacity: 100 signals
- Lookback window: 10 minutes
- Cooldown: 5 minutes
"""

from eduforge.core.proactive.arbiter import Arbiter, CooldownGate
from eduforge.core.proactive.detectors import (
    DEFAULT_DETECTORS,
    BaseDetector,
    build_default_detectors,
)
from eduforge.core.proactive.engine import ProactiveInterventionEngine
from eduforge.core.proactive.nudges import (
    Nudge,
    NudgeAction,
    NudgeCandidate,
    NudgePriority,
    NudgeStatus,
    NudgeType,
)
from eduforge.core.proactive.schemas import NudgeEvent
from eduforge.core.proactive.service import (
    ProactiveService,
    ProactiveServiceError,
    get_proactive_service,
    reset_proactive_service,
)
from eduforge.core.proactive.signals import (
    BehaviorSignal,
    BehaviorSignalType,
    SignalBuffer,
)

__all__ = [
    # Service
    "ProactiveService",
    "ProactiveServiceError",
    "get_proactive_service",
    "reset_proactive_service",
    # Engine
    "ProactiveInterventionEngine",
    "Arbiter",
    "CooldownGate",
    "SignalBuffer",
    # Detectors
    "BaseDetector",
    "DEFAULT_DETECTORS",
    "build_default_detectors",
    # Types
    "BehaviorSignal",
    "BehaviorSignalType",
    "Nudge",
    "NudgeAction",
    "NudgeCandidate",
    "NudgeEvent",
    "NudgePriority",
    "NudgeStatus",
    "NudgeType",
]
