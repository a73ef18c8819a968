# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Arbitration and cooldown for proactive nudges.

The Arbiter selects at most one candidate per evaluation by running the
detectors in their fixed precedence order and stopping at the first one
that fires. It does not rank by severity.

The CooldownGate enforces a minimum gap between two emitted nudges of
any type. While it is closed the engine skips arbitration entirely.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from eduforge.core.proactive.detectors import BaseDetector, build_default_detectors
from eduforge.core.proactive.nudges import NudgeCandidate
from eduforge.core.proactive.signals import BehaviorSignal

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN = timedelta(minutes=5)


class Arbiter:
    """First-match-wins selection over an ordered detector list.

    Attributes:
        detectors: Detectors in precedence order.
    """

    def __init__(self, detectors: Sequence[BaseDetector] | None = None) -> None:
        self.detectors: list[BaseDetector] = (
            list(detectors) if detectors is not None else build_default_detectors()
        )

    def evaluate(
        self,
        signals: Sequence[BehaviorSignal],
    ) -> tuple[BaseDetector, NudgeCandidate] | None:
        """Run detectors in order and return the first candidate.

        A detector that raises is logged and skipped so that malformed
        input degrades to "no nudge".

        Args:
            signals: Windowed signals, oldest first.

        Returns:
            (detector, candidate) for the first detector that fired, or None.
        """
        if not signals:
            return None

        for detector in self.detectors:
            try:
                candidate = detector.detect(signals)
            except Exception as e:
                logger.error(
                    "Detector %s failed: %s",
                    detector.name,
                    str(e),
                    exc_info=True,
                )
                # Continue with other detectors
                continue

            if candidate is not None:
                return detector, candidate

        return None


class CooldownGate:
    """Minimum interval between emitted nudges for one session."""

    def __init__(self, cooldown: timedelta = DEFAULT_COOLDOWN) -> None:
        self.cooldown = cooldown
        self.last_nudge_time: datetime | None = None

    def is_open(self, now: datetime) -> bool:
        """Check whether a nudge may be emitted at now."""
        if self.last_nudge_time is None:
            return True
        return now - self.last_nudge_time >= self.cooldown

    def remaining(self, now: datetime) -> timedelta:
        """Time left until the gate opens (zero when open)."""
        if self.last_nudge_time is None:
            return timedelta(0)
        return max(timedelta(0), self.last_nudge_time + self.cooldown - now)

    def mark(self, now: datetime) -> None:
        """Record a successful emission."""
        self.last_nudge_time = now
