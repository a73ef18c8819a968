# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Retention detectors: overdue reviews, streaks at risk, mastery plateaus.

Review and streak signals come from schedulers rather than live
interaction, so they fire on any intensity. Their priority escalates
with the count carried in metadata:
- review_overdue: metadata.overdueCount > 5 -> high
- streak_at_risk: metadata.currentStreak > 7 -> high

A missing, zero or malformed count falls back to 1.
"""

from datetime import timedelta

from eduforge.core.proactive.detectors.base import (
    BaseDetector,
    format_count,
    read_number,
)
from eduforge.core.proactive.nudges import (
    NudgeAction,
    NudgeCandidate,
    NudgePriority,
    NudgeType,
)
from eduforge.core.proactive.signals import BehaviorSignal, BehaviorSignalType


class ReviewOverdueDetector(BaseDetector):
    """Spaced repetition reviews past their due date."""

    SIGNAL_TYPE = BehaviorSignalType.REVIEW_OVERDUE
    MIN_COUNT = 1
    MIN_INTENSITY = None
    HIGH_PRIORITY_COUNT = 5
    EXPIRES_IN = timedelta(minutes=60)

    @property
    def name(self) -> str:
        return "review_overdue"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        # Earliest signal in the window carries the count
        count = read_number(matches[0].metadata, "overdueCount") or 1
        plural = "s" if count > 1 else ""

        return self.create_candidate(
            nudge_type=NudgeType.REVIEW_REMINDER,
            priority=(
                NudgePriority.HIGH
                if count > self.HIGH_PRIORITY_COUNT
                else NudgePriority.MEDIUM
            ),
            message=f"You have {format_count(count)} concept{plural} due for review.",
            detailed_message=(
                "Spaced repetition is the most efficient way to lock knowledge into "
                "long-term memory. Even 5 minutes of review now will save you hours later."
            ),
            suggested_action=NudgeAction(
                label="Start Review",
                action="switch_mode",
                data={"mode": "REVIEW"},
            ),
            expires_in=self.EXPIRES_IN,
        )


class StreakAtRiskDetector(BaseDetector):
    """Daily study streak about to break."""

    SIGNAL_TYPE = BehaviorSignalType.STREAK_AT_RISK
    MIN_COUNT = 1
    MIN_INTENSITY = None
    HIGH_PRIORITY_STREAK = 7
    EXPIRES_IN = timedelta(hours=2)

    @property
    def name(self) -> str:
        return "streak_at_risk"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        streak = read_number(matches[0].metadata, "currentStreak") or 1
        days = format_count(streak)

        return self.create_candidate(
            nudge_type=NudgeType.STREAK_REMINDER,
            priority=(
                NudgePriority.HIGH
                if streak > self.HIGH_PRIORITY_STREAK
                else NudgePriority.MEDIUM
            ),
            message=f"Your {days}-day streak is at risk!",
            detailed_message=(
                "Just 5 minutes of quality study will keep your streak alive. "
                f"You've worked hard to get to {days} days. Don't let it slip!"
            ),
            suggested_action=NudgeAction(
                label="Quick Study Session",
                action="start_timer",
                data={"duration": 5, "mode": "REVIEW"},
            ),
            expires_in=self.EXPIRES_IN,
        )


class MasteryPlateauDetector(BaseDetector):
    """No measurable improvement over multiple sessions."""

    SIGNAL_TYPE = BehaviorSignalType.MASTERY_PLATEAU
    MIN_COUNT = 1
    MIN_INTENSITY = 0.5
    EXPIRES_IN = timedelta(minutes=20)

    @property
    def name(self) -> str:
        return "mastery_plateau"

    def build(self, matches: list[BehaviorSignal]) -> NudgeCandidate:
        return self.create_candidate(
            nudge_type=NudgeType.DIFFICULTY_ADJUSTMENT,
            priority=NudgePriority.MEDIUM,
            message="Let's try a different approach.",
            detailed_message=(
                "You've been working hard, but progress has plateaued. Sometimes "
                "approaching a concept from a different angle helps break through. "
                "Want to try Learn mode with a fresh explanation?"
            ),
            suggested_action=NudgeAction(
                label="Fresh Start in Learn Mode",
                action="switch_mode",
                data={"mode": "LEARN"},
            ),
            expires_in=self.EXPIRES_IN,
        )
