# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Nudge detectors for behavioral signals.

DEFAULT_DETECTORS lists the detectors in precedence order. The arbiter
returns the candidate of the first detector that fires, regardless of
priority: a medium hesitation nudge preempts a high error_streak nudge
when both conditions hold at once.

Usage:
    from eduforge.core.proactive.detectors import build_default_detectors

    detectors = build_default_detectors()
    candidate = detectors[0].detect(window)
"""

from eduforge.core.proactive.detectors.base import (
    BaseDetector,
    as_number,
    format_count,
    read_number,
)
from eduforge.core.proactive.detectors.confidence import ConfidenceDivergenceDetector
from eduforge.core.proactive.detectors.engagement import (
    EngagementDropDetector,
    ProcrastinationDetector,
)
from eduforge.core.proactive.detectors.retention import (
    MasteryPlateauDetector,
    ReviewOverdueDetector,
    StreakAtRiskDetector,
)
from eduforge.core.proactive.detectors.struggle import (
    ErrorStreakDetector,
    FrustrationDetector,
    HesitationDetector,
)

DEFAULT_DETECTORS: tuple[type[BaseDetector], ...] = (
    HesitationDetector,
    ErrorStreakDetector,
    FrustrationDetector,
    EngagementDropDetector,
    ConfidenceDivergenceDetector,
    ProcrastinationDetector,
    ReviewOverdueDetector,
    StreakAtRiskDetector,
    MasteryPlateauDetector,
)


def build_default_detectors() -> list[BaseDetector]:
    """Instantiate DEFAULT_DETECTORS in precedence order."""
    return [detector_cls() for detector_cls in DEFAULT_DETECTORS]


__all__ = [
    # Base
    "BaseDetector",
    "as_number",
    "format_count",
    "read_number",
    # Precedence
    "DEFAULT_DETECTORS",
    "build_default_detectors",
    # Detectors
    "ConfidenceDivergenceDetector",
    "EngagementDropDetector",
    "ErrorStreakDetector",
    "FrustrationDetector",
    "HesitationDetector",
    "MasteryPlateauDetector",
    "ProcrastinationDetector",
    "ReviewOverdueDetector",
    "StreakAtRiskDetector",
]
