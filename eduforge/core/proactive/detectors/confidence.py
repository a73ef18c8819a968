# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Confidence divergence detector.

The confidence-tracking subsystem emits a confidence_divergence signal
when the learner's self-rated confidence and the AI's estimate of their
mastery drift apart. The signal carries both values in its metadata:

    {"studentConfidence": 0.9, "aiConfidence": 0.4}

Only the most recent qualifying signal decides the direction:
- Overconfident (student > AI): suggest a challenging quiz
- Otherwise (underconfident, or values missing): encourage
"""

from datetime import timedelta

from eduforge.core.proactive.detectors.base import BaseDetector, read_number
from eduforge.core.proactive.nudges import (
    NudgeAction,
    NudgeCandidate,
    NudgePriority,
    NudgeType,
)
from eduforge.core.proactive.signals import BehaviorSignal, BehaviorSignalType


class ConfidenceDivergenceDetector(BaseDetector):
    """Gap between student and AI confidence."""

    SIGNAL_TYPE = BehaviorSignalType.CONFIDENCE_DIVERGENCE
    MIN_COUNT = 1
    MIN_INTENSITY = 0.6
    OVERCONFIDENT_EXPIRES_IN = timedelta(minutes=15)
    UNDERCONFIDENT_EXPIRES_IN = timedelta(minutes=10)

    @property
    def name(self) -> str:
        return "confidence_divergence"

    def is_overconfident(self, signal: BehaviorSignal) -> bool:
        """Check whether the student rates themselves above the AI estimate.

        Missing or malformed confidences count as not overconfident.
        """
        student = read_number(signal.metadata, "studentConfidence")
        ai = read_number(signal.metadata, "aiConfidence")
        if student is None or ai is None:
            return False
        return student > ai

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        latest = matches[-1]

        if self.is_overconfident(latest):
            return self.create_candidate(
                nudge_type=NudgeType.CONFIDENCE_CHECK,
                priority=NudgePriority.MEDIUM,
                message="Let's double-check your understanding.",
                detailed_message=(
                    "You seem confident, which is great! But your recent answers "
                    "suggest there might be some gaps. A quick targeted practice "
                    "session can make sure your confidence is well-placed."
                ),
                suggested_action=NudgeAction(
                    label="Take a Quick Quiz",
                    action="start_quiz",
                    data={"difficulty": "challenging"},
                ),
                expires_in=self.OVERCONFIDENT_EXPIRES_IN,
            )

        return self.create_candidate(
            nudge_type=NudgeType.ENCOURAGEMENT,
            priority=NudgePriority.MEDIUM,
            message="You're doing better than you think!",
            detailed_message=(
                "Your recent performance has been strong, even if it doesn't feel "
                "that way. Trust the data: you've been getting most of these right!"
            ),
            expires_in=self.UNDERCONFIDENT_EXPIRES_IN,
        )
