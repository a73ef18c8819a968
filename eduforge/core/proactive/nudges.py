# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Nudge data structures.

A NudgeCandidate is what a detector proposes: content plus an expiry
offset. The engine turns an accepted candidate into a Nudge by giving it
an id and absolute timestamps. Once created, a Nudge's content never
changes; only its lifecycle fields are stamped, each at most once:

    pending -> delivered -> responded (accepted or dismissed)
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from eduforge.core.proactive.signals import BehaviorSignalType

if TYPE_CHECKING:
    from eduforge.core.proactive.schemas import NudgeEvent


class NudgeType(str, Enum):
    """Kinds of proactive suggestions."""

    TAKE_BREAK = "take_break"
    TRY_DIFFERENT_MODE = "try_different_mode"
    REVIEW_REMINDER = "review_reminder"
    ENCOURAGEMENT = "encouragement"
    MISCONCEPTION_ALERT = "misconception_alert"
    DIFFICULTY_ADJUSTMENT = "difficulty_adjustment"
    STUDY_SUGGESTION = "study_suggestion"
    STREAK_REMINDER = "streak_reminder"
    CONFIDENCE_CHECK = "confidence_check"
    TEACHER_ATTENTION = "teacher_attention"


class NudgePriority(str, Enum):
    """How urgently a nudge should be surfaced."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NudgeStatus(str, Enum):
    """Lifecycle position of a nudge."""

    PENDING = "pending"
    DELIVERED = "delivered"
    RESPONDED = "responded"
    DISMISSED = "dismissed"


@dataclass(frozen=True)
class NudgeAction:
    """Suggested follow-up the client can trigger from a nudge.

    Attributes:
        label: Button text shown to the learner.
        action: Action identifier understood by the client (switch_mode, ...).
        data: Action payload.
    """

    label: str
    action: str
    data: dict[str, Any] | None = None


@dataclass(frozen=True)
class NudgeCandidate:
    """A fully formed nudge proposal, not yet accepted by the engine.

    Attributes:
        type: Nudge type.
        priority: Nudge priority.
        message: Short message.
        expires_in: Lifetime once accepted.
        trigger_signals: Signal types that caused it.
        detailed_message: Longer explanation.
        suggested_action: Optional follow-up action.
    """

    type: NudgeType
    priority: NudgePriority
    message: str
    expires_in: timedelta
    trigger_signals: tuple[BehaviorSignalType, ...] = ()
    detailed_message: str | None = None
    suggested_action: NudgeAction | None = None


_CONTENT_FIELDS = frozenset({
    "id",
    "type",
    "priority",
    "message",
    "detailed_message",
    "suggested_action",
    "trigger_signals",
    "created_at",
    "expires_at",
})
_LIFECYCLE_FIELDS = frozenset({"delivered_at", "responded_at", "dismissed"})


@dataclass(eq=False)
class Nudge:
    """A tracked proactive suggestion.

    Content fields are immutable after creation. Lifecycle fields start
    as None and are stamped once through mark_delivered() and
    mark_responded().
    """

    id: str
    type: NudgeType
    priority: NudgePriority
    message: str
    trigger_signals: tuple[BehaviorSignalType, ...]
    created_at: datetime
    expires_at: datetime
    detailed_message: str | None = None
    suggested_action: NudgeAction | None = None
    delivered_at: datetime | None = field(default=None, init=False)
    responded_at: datetime | None = field(default=None, init=False)
    dismissed: bool | None = field(default=None, init=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__dict__:
            if name in _CONTENT_FIELDS:
                raise AttributeError(f"Nudge.{name} cannot be changed after creation")
            if name in _LIFECYCLE_FIELDS and self.__dict__[name] is not None:
                raise AttributeError(f"Nudge.{name} is already set")
        super().__setattr__(name, value)

    @classmethod
    def from_candidate(cls, candidate: NudgeCandidate, now: datetime) -> "Nudge":
        """Accept a candidate, fixing its id and absolute expiry."""
        return cls(
            id=str(uuid4()),
            type=candidate.type,
            priority=candidate.priority,
            message=candidate.message,
            detailed_message=candidate.detailed_message,
            suggested_action=candidate.suggested_action,
            trigger_signals=tuple(candidate.trigger_signals),
            created_at=now,
            expires_at=now + candidate.expires_in,
        )

    @property
    def status(self) -> NudgeStatus:
        if self.responded_at is not None:
            return NudgeStatus.DISMISSED if self.dismissed else NudgeStatus.RESPONDED
        if self.delivered_at is not None:
            return NudgeStatus.DELIVERED
        return NudgeStatus.PENDING

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def mark_delivered(self, now: datetime) -> bool:
        """Stamp delivered_at. Returns False if already delivered."""
        if self.delivered_at is not None:
            return False
        self.delivered_at = now
        return True

    def mark_responded(self, now: datetime, dismissed: bool) -> bool:
        """Stamp responded_at and dismissed.

        Returns False if the nudge was never delivered or already has a
        response.
        """
        if self.delivered_at is None or self.responded_at is not None:
            return False
        self.responded_at = now
        self.dismissed = dismissed
        return True

    def to_event(self, user_id: str | None = None) -> "NudgeEvent":
        """Build the realtime event pushed to the client by the transport."""
        from eduforge.core.proactive.schemas import NudgeEvent

        return NudgeEvent.from_nudge(self, user_id=user_id)
