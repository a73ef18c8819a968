# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Engagement detectors: engagement drop and procrastination.

Both produce low priority study suggestions; they only need a single
qualifying signal from the session-activity monitors.
"""

from datetime import timedelta

from eduforge.core.proactive.detectors.base import BaseDetector
from eduforge.core.proactive.nudges import (
    NudgeAction,
    NudgeCandidate,
    NudgePriority,
    NudgeType,
)
from eduforge.core.proactive.signals import BehaviorSignal, BehaviorSignalType


class EngagementDropDetector(BaseDetector):
    """Reduced interaction frequency."""

    SIGNAL_TYPE = BehaviorSignalType.ENGAGEMENT_DROP
    MIN_COUNT = 1
    MIN_INTENSITY = 0.5
    EXPIRES_IN = timedelta(minutes=10)

    @property
    def name(self) -> str:
        return "engagement_drop"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        return self.create_candidate(
            nudge_type=NudgeType.STUDY_SUGGESTION,
            priority=NudgePriority.LOW,
            message="Want to switch things up?",
            detailed_message=(
                "Sometimes a change of topic or mode can re-energize your study "
                "session. Try a quick review of something you already know well. "
                "That confidence boost can carry over!"
            ),
            suggested_action=NudgeAction(
                label="Quick Review",
                action="switch_mode",
                data={"mode": "REVIEW"},
            ),
            expires_in=self.EXPIRES_IN,
        )


class ProcrastinationDetector(BaseDetector):
    """Extended idle time during a session."""

    SIGNAL_TYPE = BehaviorSignalType.PROCRASTINATION
    MIN_COUNT = 1
    MIN_INTENSITY = 0.5
    EXPIRES_IN = timedelta(minutes=30)
    STARTER_MINUTES = 5

    @property
    def name(self) -> str:
        return "procrastination"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        return self.create_candidate(
            nudge_type=NudgeType.STUDY_SUGGESTION,
            priority=NudgePriority.LOW,
            message="Ready to get started? Let's make it easy.",
            detailed_message=(
                f"How about we start with just {self.STARTER_MINUTES} minutes of review? "
                "Often the hardest part is beginning. Once you're in flow, you can "
                "keep going or stop, no pressure."
            ),
            suggested_action=NudgeAction(
                label=f"Start {self.STARTER_MINUTES}-Minute Review",
                action="start_timer",
                data={"duration": self.STARTER_MINUTES, "mode": "REVIEW"},
            ),
            expires_in=self.EXPIRES_IN,
        )
