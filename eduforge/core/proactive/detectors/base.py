# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base detector class for proactive nudges.

Detectors are pure rules: each inspects the windowed signals of one
session and either proposes a NudgeCandidate or returns None. They hold
no session state, so one set of detector instances may be shared.

A detector fires when at least MIN_COUNT signals of its SIGNAL_TYPE have
an intensity strictly above MIN_INTENSITY. A MIN_INTENSITY of None
accepts any intensity.
"""

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import Any, ClassVar

from eduforge.core.proactive.nudges import (
    NudgeAction,
    NudgeCandidate,
    NudgePriority,
    NudgeType,
)
from eduforge.core.proactive.signals import BehaviorSignal, BehaviorSignalType


def as_number(value: Any) -> float | None:
    """Return value if it is a finite int or float, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def read_number(metadata: Mapping[str, Any], key: str) -> float | None:
    """Read a numeric metadata field, treating malformed values as absent.

    Args:
        metadata: Signal metadata.
        key: Field name.

    Returns:
        The number, or None if missing, non-numeric, boolean or not finite.
    """
    if not isinstance(metadata, Mapping):
        return None
    return as_number(metadata.get(key))


def format_count(value: float) -> str:
    """Render a count without a trailing .0 for whole numbers."""
    return str(int(value)) if float(value).is_integer() else str(value)


class BaseDetector(ABC):
    """Abstract base class for nudge detectors.

    Subclasses set SIGNAL_TYPE and the thresholds, and implement
    build() to turn the qualifying signals into a candidate.
    """

    SIGNAL_TYPE: ClassVar[BehaviorSignalType]
    MIN_COUNT: ClassVar[int] = 1
    MIN_INTENSITY: ClassVar[float | None] = 0.5

    def __init__(self) -> None:
        """Initialize the detector."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the detector name."""
        ...

    def qualifying(self, signals: Sequence[BehaviorSignal]) -> list[BehaviorSignal]:
        """Return the signals of this detector's type above its intensity bar."""
        matches = []
        for signal in signals:
            if signal.type != self.SIGNAL_TYPE:
                continue
            if self.MIN_INTENSITY is None:
                matches.append(signal)
                continue
            intensity = as_number(signal.intensity)
            if intensity is not None and intensity > self.MIN_INTENSITY:
                matches.append(signal)
        return matches

    def detect(self, signals: Sequence[BehaviorSignal]) -> NudgeCandidate | None:
        """Check whether this detector fires over the given window.

        Args:
            signals: Windowed signals, oldest first.

        Returns:
            NudgeCandidate if the firing condition holds, None otherwise.
        """
        matches = self.qualifying(signals)
        if len(matches) < self.MIN_COUNT:
            return None

        self.logger.debug(
            "Detector %s matched %d %s signals",
            self.name,
            len(matches),
            self.SIGNAL_TYPE.value,
        )
        return self.build(matches)

    @abstractmethod
    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        """Build the candidate nudge.

        Args:
            matches: Qualifying signals, oldest first. Never empty.

        Returns:
            NudgeCandidate instance.
        """
        ...

    def create_candidate(
        self,
        nudge_type: NudgeType,
        priority: NudgePriority,
        message: str,
        expires_in: timedelta,
        detailed_message: str | None = None,
        suggested_action: NudgeAction | None = None,
    ) -> NudgeCandidate:
        """Helper method to create a candidate triggered by SIGNAL_TYPE."""
        return NudgeCandidate(
            type=nudge_type,
            priority=priority,
            message=message,
            expires_in=expires_in,
            trigger_signals=(self.SIGNAL_TYPE,),
            detailed_message=detailed_message,
            suggested_action=suggested_action,
        )
