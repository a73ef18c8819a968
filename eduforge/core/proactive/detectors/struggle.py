# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle detectors: hesitation, error streaks and frustration.

These fire on repeated in-the-moment difficulty and point the learner
to a different mode or a short break.
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


class HesitationDetector(BaseDetector):
    """Repeated long pauses before answering.

    Thresholds:
    - 3+ hesitation signals with intensity > 0.6
    """

    SIGNAL_TYPE = BehaviorSignalType.HESITATION
    MIN_COUNT = 3
    MIN_INTENSITY = 0.6
    EXPIRES_IN = timedelta(minutes=10)

    @property
    def name(self) -> str:
        return "hesitation"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        return self.create_candidate(
            nudge_type=NudgeType.TRY_DIFFERENT_MODE,
            priority=NudgePriority.MEDIUM,
            message="I notice you're taking more time on these questions.",
            detailed_message=(
                "That's okay! Would you like to switch to Learn mode for a deeper "
                "explanation, or try some easier practice problems first?"
            ),
            suggested_action=NudgeAction(
                label="Switch to Learn Mode",
                action="switch_mode",
                data={"mode": "LEARN"},
            ),
            expires_in=self.EXPIRES_IN,
        )


class ErrorStreakDetector(BaseDetector):
    """Consecutive errors suggesting a misconception.

    Thresholds:
    - 2+ error_streak signals with intensity > 0.5
    """

    SIGNAL_TYPE = BehaviorSignalType.ERROR_STREAK
    MIN_COUNT = 2
    MIN_INTENSITY = 0.5
    EXPIRES_IN = timedelta(minutes=15)

    @property
    def name(self) -> str:
        return "error_streak"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        return self.create_candidate(
            nudge_type=NudgeType.MISCONCEPTION_ALERT,
            priority=NudgePriority.HIGH,
            message="It looks like there's a pattern in these errors.",
            detailed_message=(
                "Let's use Debug mode to understand exactly where your thinking "
                "diverges from the correct approach. It's the fastest way to fix this!"
            ),
            suggested_action=NudgeAction(
                label="Open Debug Mode",
                action="switch_mode",
                data={"mode": "DEBUG"},
            ),
            expires_in=self.EXPIRES_IN,
        )


class FrustrationDetector(BaseDetector):
    """Rapid edits and deletions indicating frustration.

    Thresholds:
    - 2+ frustration signals with intensity > 0.7
    """

    SIGNAL_TYPE = BehaviorSignalType.FRUSTRATION
    MIN_COUNT = 2
    MIN_INTENSITY = 0.7
    EXPIRES_IN = timedelta(minutes=5)
    BREAK_MINUTES = 5

    @property
    def name(self) -> str:
        return "frustration"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        return self.create_candidate(
            nudge_type=NudgeType.TAKE_BREAK,
            priority=NudgePriority.HIGH,
            message="Learning is hard work. A short break might help.",
            detailed_message=(
                "Research shows that 5-10 minute breaks actually improve learning. "
                "When you come back, we'll approach this from a different angle."
            ),
            suggested_action=NudgeAction(
                label=f"Take a {self.BREAK_MINUTES}-minute Break",
                action="start_break",
                data={"duration": self.BREAK_MINUTES},
            ),
            expires_in=self.EXPIRES_IN,
        )
