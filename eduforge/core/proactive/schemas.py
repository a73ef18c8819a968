# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Realtime event schemas for nudge delivery.

The delivery transport (push or streaming channel) owns the wire, but it
needs a stable payload shape for nudges. These models describe the
``nudge`` realtime event the client listens for.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from eduforge.core.proactive.nudges import NudgePriority, NudgeType

if TYPE_CHECKING:
    from eduforge.core.proactive.nudges import Nudge


class NudgeActionSchema(BaseModel):
    """Suggested action attached to a nudge."""

    label: str = Field(description="Button text shown to the learner")
    action: str = Field(description="Client action identifier (switch_mode, start_break, ...)")
    data: dict[str, Any] | None = Field(
        default=None,
        description="Action payload, e.g. {'mode': 'LEARN'}",
    )


class NudgeEventPayload(BaseModel):
    """Payload of a nudge realtime event."""

    nudge_type: NudgeType
    message: str
    detailed_message: str | None = None
    action: NudgeActionSchema | None = None
    priority: NudgePriority
    dismissible: bool = Field(
        default=True,
        description="Urgent nudges cannot be dismissed from the client",
    )
    expires_at: datetime | None = None


class NudgeEvent(BaseModel):
    """Realtime ``nudge`` event."""

    type: Literal["nudge"] = "nudge"
    id: str = Field(description="Nudge ID, echoed back on deliver/respond")
    user_id: str | None = None
    timestamp: datetime = Field(description="When the nudge was created")
    payload: NudgeEventPayload

    @classmethod
    def from_nudge(cls, nudge: "Nudge", user_id: str | None = None) -> "NudgeEvent":
        action = None
        if nudge.suggested_action is not None:
            action = NudgeActionSchema(
                label=nudge.suggested_action.label,
                action=nudge.suggested_action.action,
                data=nudge.suggested_action.data,
            )

        return cls(
            id=nudge.id,
            user_id=user_id,
            timestamp=nudge.created_at,
            payload=NudgeEventPayload(
                nudge_type=nudge.type,
                message=nudge.message,
                detailed_message=nudge.detailed_message,
                action=action,
                priority=nudge.priority,
                dismissible=nudge.priority != NudgePriority.URGENT,
                expires_at=nudge.expires_at,
            ),
        )
