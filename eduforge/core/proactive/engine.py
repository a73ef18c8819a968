# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Proactive intervention engine for one learner session.

The engine ties the signal buffer, cooldown gate and arbiter together and
tracks every emitted nudge through its lifecycle:

    record_signal() -> pending -> deliver_nudge() -> delivered
                                -> respond_to_nudge() -> responded/dismissed

A pending nudge whose expiry passes before delivery is dropped from the
pending set the next time it is read. It is kept in an expired list for
observability but is otherwise unreachable.

There is exactly one engine per session and it is not safe for
concurrent mutation; callers serving many sessions must confine each
engine to a single owner (see ProactiveService).

Usage:
    engine = ProactiveInterventionEngine()
    nudge = engine.record_signal(
        BehaviorSignal(type=BehaviorSignalType.HESITATION, intensity=0.7)
    )
    if nudge:
        engine.deliver_nudge(nudge.id)
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from eduforge.core.config import ProactiveSettings, get_settings
from eduforge.core.proactive.arbiter import Arbiter, CooldownGate
from eduforge.core.proactive.detectors import BaseDetector
from eduforge.core.proactive.nudges import Nudge
from eduforge.core.proactive.signals import BehaviorSignal, SignalBuffer
from eduforge.utils.datetime import Clock, ensure_utc, seconds_to_human, utc_now

logger = logging.getLogger(__name__)


class ProactiveInterventionEngine:
    """Decides whether, what and how urgently to nudge one learner.

    Attributes:
        settings: Buffer capacity, lookback window and cooldown.
        buffer: Recent signals for this session.
        gate: Cooldown between emitted nudges.
        arbiter: Ordered detector set.
    """

    def __init__(
        self,
        settings: ProactiveSettings | None = None,
        detectors: Sequence[BaseDetector] | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Engine settings. Defaults to get_settings().proactive.
            detectors: Detectors in precedence order. Defaults to
                DEFAULT_DETECTORS.
            clock: Returns the current time. Injectable for tests.
        """
        self.settings = settings or get_settings().proactive
        self._clock = clock

        self.buffer = SignalBuffer(
            capacity=self.settings.buffer_capacity,
            lookback=self.settings.lookback,
        )
        self.gate = CooldownGate(cooldown=self.settings.cooldown)
        self.arbiter = Arbiter(detectors)

        self._pending: list[Nudge] = []
        self._delivered: list[Nudge] = []
        self._expired: list[Nudge] = []

    def _now(self) -> datetime:
        return ensure_utc(self._clock())

    @property
    def last_nudge_time(self) -> datetime | None:
        return self.gate.last_nudge_time

    @property
    def signal_count(self) -> int:
        return len(self.buffer)

    def record_signal(self, signal: BehaviorSignal) -> Nudge | None:
        """Record a behavior signal and emit a nudge if one is warranted.

        The signal is always buffered. Detectors only run when the
        cooldown gate is open.

        Args:
            signal: Signal from an upstream producer.

        Returns:
            The newly created pending Nudge, or None.
        """
        self.buffer.record(signal)
        now = self._now()

        if not self.gate.is_open(now):
            logger.debug(
                "Cooldown active, %s remaining; skipping evaluation",
                seconds_to_human(int(self.gate.remaining(now).total_seconds())),
            )
            return None

        result = self.arbiter.evaluate(self.buffer.windowed(now))
        if result is None:
            return None

        detector, candidate = result
        nudge = Nudge.from_candidate(candidate, now)
        self._pending.append(nudge)
        self.gate.mark(now)

        logger.info(
            "Detector %s emitted %s nudge %s (priority=%s)",
            detector.name,
            nudge.type.value,
            nudge.id,
            nudge.priority.value,
        )
        return nudge

    def get_pending_nudges(self) -> list[Nudge]:
        """Return pending nudges that have not expired.

        Expired nudges are removed from the pending set as a side effect.
        """
        now = self._now()
        live: list[Nudge] = []
        for nudge in self._pending:
            if nudge.is_expired(now):
                self._expired.append(nudge)
                logger.debug("Nudge %s expired before delivery", nudge.id)
            else:
                live.append(nudge)
        self._pending = live
        return list(live)

    def deliver_nudge(self, nudge_id: str) -> None:
        """Move a pending nudge to delivered, stamping delivered_at.

        Unknown or already delivered ids are ignored.
        """
        nudge = next((n for n in self._pending if n.id == nudge_id), None)
        if nudge is None:
            logger.debug("deliver_nudge: %s not pending, ignoring", nudge_id)
            return

        nudge.mark_delivered(self._now())
        self._pending = [n for n in self._pending if n.id != nudge_id]
        self._delivered.append(nudge)

    def respond_to_nudge(self, nudge_id: str, dismissed: bool) -> None:
        """Record the learner's response to a delivered nudge.

        Ids that are unknown, undelivered or already responded are ignored.
        """
        nudge = next((n for n in self._delivered if n.id == nudge_id), None)
        if nudge is None:
            logger.debug("respond_to_nudge: %s not delivered, ignoring", nudge_id)
            return

        if nudge.mark_responded(self._now(), dismissed):
            logger.info(
                "Nudge %s %s",
                nudge_id,
                "dismissed" if dismissed else "accepted",
            )

    def get_delivered_nudges(self) -> list[Nudge]:
        """Return every nudge delivered in this session, including responded ones."""
        return list(self._delivered)

    def get_expired_nudges(self) -> list[Nudge]:
        """Return nudges that lapsed before delivery and have been read out."""
        return list(self._expired)
