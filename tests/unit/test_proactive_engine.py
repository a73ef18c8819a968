# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for ProactiveInterventionEngine.

Covers the engine's public operations end to end:
- record_signal: buffering, cooldown and arbitration
- get_pending_nudges: lazy expiry
- deliver_nudge / respond_to_nudge: lifecycle and idempotence
- get_delivered_nudges / get_expired_nudges
"""

from datetime import timedelta

import pytest

from eduforge.core.config import ProactiveSettings
from eduforge.core.proactive import (
    BehaviorSignal,
    BehaviorSignalType,
    NudgePriority,
    NudgeStatus,
    NudgeType,
    ProactiveInterventionEngine,
)


def _record_hesitations(engine, make_signal, clock, count=3):
    nudge = None
    for _ in range(count):
        nudge = engine.record_signal(make_signal(BehaviorSignalType.HESITATION, 0.7))
        clock.advance(seconds=40)
    return nudge


class TestRecordSignal:
    """Tests for record_signal."""

    def test_third_hesitation_emits_nudge(self, engine, make_signal, clock) -> None:
        """Three hesitations within two minutes produce try_different_mode."""
        first = engine.record_signal(make_signal(BehaviorSignalType.HESITATION, 0.7))
        clock.advance(seconds=50)
        second = engine.record_signal(make_signal(BehaviorSignalType.HESITATION, 0.7))
        clock.advance(seconds=50)
        emitted_at = clock()
        third = engine.record_signal(make_signal(BehaviorSignalType.HESITATION, 0.7))

        assert first is None
        assert second is None
        assert third is not None
        assert third.type == NudgeType.TRY_DIFFERENT_MODE
        assert third.priority == NudgePriority.MEDIUM
        assert third.created_at == emitted_at
        assert third.expires_at == emitted_at + timedelta(minutes=10)

    def test_second_error_streak_emits_misconception_alert(self, engine, make_signal) -> None:
        """Two error streaks produce a high priority misconception alert."""
        assert engine.record_signal(make_signal(BehaviorSignalType.ERROR_STREAK, 0.6)) is None

        nudge = engine.record_signal(make_signal(BehaviorSignalType.ERROR_STREAK, 0.6))

        assert nudge.type == NudgeType.MISCONCEPTION_ALERT
        assert nudge.priority == NudgePriority.HIGH

    def test_cooldown_suppresses_next_nudge(self, engine, make_signal, clock) -> None:
        """A qualifying signal within five minutes of a nudge returns None."""
        engine.record_signal(make_signal(BehaviorSignalType.ERROR_STREAK, 0.6))
        assert engine.record_signal(make_signal(BehaviorSignalType.ERROR_STREAK, 0.6)) is not None

        clock.advance(minutes=2)
        assert engine.record_signal(make_signal(BehaviorSignalType.ERROR_STREAK, 0.6)) is None
        assert len(engine.get_pending_nudges()) == 1

    def test_signals_are_buffered_during_cooldown(self, engine, make_signal, clock) -> None:
        """Signals recorded while the gate is closed still count later."""
        engine.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9))
        clock.advance(minutes=1)
        engine.record_signal(make_signal(BehaviorSignalType.FRUSTRATION, 0.9))
        clock.advance(minutes=1)
        engine.record_signal(make_signal(BehaviorSignalType.FRUSTRATION, 0.9))

        clock.advance(minutes=3)
        nudge = engine.record_signal(make_signal("heartbeat", 0.0))

        assert nudge is not None
        assert nudge.type == NudgeType.TAKE_BREAK
        assert engine.signal_count == 4

    def test_streak_at_risk_message(self, engine, make_signal) -> None:
        """A ten-day streak at risk is high priority and named in the message."""
        nudge = engine.record_signal(
            make_signal(BehaviorSignalType.STREAK_AT_RISK, 0.5, metadata={"currentStreak": 10})
        )

        assert "10-day streak" in nudge.message
        assert nudge.priority == NudgePriority.HIGH

    def test_signals_outside_window_are_ignored(self, engine, make_signal, clock) -> None:
        """Hesitations spread over more than ten minutes never fire."""
        for _ in range(3):
            assert engine.record_signal(make_signal(BehaviorSignalType.HESITATION, 0.9)) is None
            clock.advance(minutes=6)

    def test_simultaneous_hesitation_and_error_streak(self, engine, make_signal) -> None:
        """With both conditions met in one evaluation, hesitation wins."""
        # Pre-fill below the firing counts
        engine.buffer.record(make_signal(BehaviorSignalType.ERROR_STREAK, 0.9))
        engine.buffer.record(make_signal(BehaviorSignalType.ERROR_STREAK, 0.9))
        engine.buffer.record(make_signal(BehaviorSignalType.HESITATION, 0.9))
        engine.buffer.record(make_signal(BehaviorSignalType.HESITATION, 0.9))

        nudge = engine.record_signal(make_signal(BehaviorSignalType.HESITATION, 0.9))

        assert nudge.type == NudgeType.TRY_DIFFERENT_MODE
        assert nudge.priority == NudgePriority.MEDIUM

    def test_unknown_type_produces_nothing(self, engine, make_signal) -> None:
        """Unrecognized signal types are ignored without error."""
        for _ in range(5):
            assert engine.record_signal(make_signal("mouse_jiggle", 1.0)) is None
        assert engine.get_pending_nudges() == []

    def test_malformed_metadata_does_not_crash(self, engine, make_signal) -> None:
        """Malformed metadata falls back to default priority."""
        nudge = engine.record_signal(
            make_signal(BehaviorSignalType.REVIEW_OVERDUE, metadata={"overdueCount": {"n": 9}})
        )

        assert nudge.priority == NudgePriority.MEDIUM
        assert nudge.message == "You have 1 concept due for review."

    def test_missing_timestamp_keeps_engine_working(self, engine, make_signal) -> None:
        """A signal without a timestamp does not break later evaluations."""
        assert engine.record_signal(
            BehaviorSignal(type=BehaviorSignalType.HESITATION, intensity=0.9, timestamp=None)  # type: ignore[arg-type]
        ) is None

        nudge = engine.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9))

        assert nudge is not None
        assert nudge.type == NudgeType.STUDY_SUGGESTION
        assert engine.signal_count == 2

    def test_null_result_leaves_pending_unchanged(self, engine, make_signal, clock) -> None:
        """A None result never changes the pending set size."""
        _record_hesitations(engine, make_signal, clock)
        before = len(engine.get_pending_nudges())

        results = [
            engine.record_signal(make_signal(signal_type, 0.9))
            for signal_type in BehaviorSignalType
        ]

        assert all(result is None for result in results)
        assert len(engine.get_pending_nudges()) == before

    def test_cooldown_property_over_a_long_stream(self, engine, make_signal, clock) -> None:
        """No two emitted nudges are created less than five minutes apart."""
        kinds = list(BehaviorSignalType)
        emitted = []
        for i in range(200):
            nudge = engine.record_signal(make_signal(kinds[i % len(kinds)], 0.95))
            if nudge is not None:
                emitted.append(nudge)
            clock.advance(seconds=17)

        assert len(emitted) > 1
        gaps = [b.created_at - a.created_at for a, b in zip(emitted, emitted[1:])]
        assert all(gap >= timedelta(minutes=5) for gap in gaps)
        assert engine.last_nudge_time == emitted[-1].created_at

    def test_custom_cooldown(self, clock, make_signal) -> None:
        """Cooldown follows the injected settings."""
        engine = ProactiveInterventionEngine(
            settings=ProactiveSettings(cooldown_minutes=1),
            clock=clock,
        )
        assert engine.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9)) is not None

        clock.advance(minutes=1)

        assert engine.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9)) is not None


class TestPendingNudges:
    """Tests for get_pending_nudges."""

    def test_expired_nudge_is_dropped(self, engine, make_signal, clock) -> None:
        """A five-minute nudge is gone six minutes later."""
        engine.record_signal(make_signal(BehaviorSignalType.FRUSTRATION, 0.9))
        nudge = engine.record_signal(make_signal(BehaviorSignalType.FRUSTRATION, 0.9))
        assert nudge.expires_at - nudge.created_at == timedelta(minutes=5)
        assert engine.get_pending_nudges() == [nudge]

        clock.advance(minutes=6)

        assert engine.get_pending_nudges() == []
        assert engine.get_expired_nudges() == [nudge]
        assert engine.get_delivered_nudges() == []

    def test_expiry_boundary(self, engine, make_signal, clock) -> None:
        """A nudge is no longer pending at its exact expiry instant."""
        nudge = engine.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9))

        clock.current = nudge.expires_at - timedelta(seconds=1)
        assert engine.get_pending_nudges() == [nudge]

        clock.current = nudge.expires_at
        assert engine.get_pending_nudges() == []

    def test_expired_nudge_cannot_be_delivered(self, engine, make_signal, clock) -> None:
        """Once dropped, delivering the nudge is a no-op."""
        nudge = engine.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9))
        clock.advance(minutes=11)
        engine.get_pending_nudges()

        engine.deliver_nudge(nudge.id)

        assert nudge.delivered_at is None
        assert engine.get_delivered_nudges() == []

    def test_returns_a_copy(self, engine, make_signal) -> None:
        """Mutating the returned list does not affect the engine."""
        engine.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9))

        engine.get_pending_nudges().clear()

        assert len(engine.get_pending_nudges()) == 1


class TestLifecycle:
    """Tests for deliver_nudge and respond_to_nudge."""

    @pytest.fixture
    def nudge(self, engine, make_signal):
        return engine.record_signal(make_signal(BehaviorSignalType.PROCRASTINATION, 0.9))

    def test_deliver_moves_to_delivered(self, engine, nudge, clock) -> None:
        """Delivery stamps delivered_at and leaves the pending set."""
        clock.advance(minutes=1)

        engine.deliver_nudge(nudge.id)

        assert nudge.delivered_at == clock()
        assert nudge.status == NudgeStatus.DELIVERED
        assert engine.get_pending_nudges() == []
        assert engine.get_delivered_nudges() == [nudge]

    def test_deliver_twice_is_idempotent(self, engine, nudge, clock) -> None:
        """A second delivery does not restamp or duplicate."""
        engine.deliver_nudge(nudge.id)
        delivered_at = nudge.delivered_at
        clock.advance(minutes=1)

        engine.deliver_nudge(nudge.id)

        assert nudge.delivered_at == delivered_at
        assert engine.get_delivered_nudges() == [nudge]

    def test_deliver_unknown_id_is_noop(self, engine, nudge) -> None:
        """Unknown ids are ignored."""
        engine.deliver_nudge("does-not-exist")

        assert engine.get_pending_nudges() == [nudge]
        assert engine.get_delivered_nudges() == []

    def test_respond_accepts(self, engine, nudge, clock) -> None:
        """Responding stamps responded_at and dismissed."""
        engine.deliver_nudge(nudge.id)
        clock.advance(minutes=2)

        engine.respond_to_nudge(nudge.id, dismissed=False)

        assert nudge.responded_at == clock()
        assert nudge.dismissed is False
        assert nudge.status == NudgeStatus.RESPONDED
        assert engine.get_delivered_nudges() == [nudge]

    def test_respond_dismisses(self, engine, nudge) -> None:
        """Dismissal is recorded."""
        engine.deliver_nudge(nudge.id)

        engine.respond_to_nudge(nudge.id, dismissed=True)

        assert nudge.dismissed is True
        assert nudge.status == NudgeStatus.DISMISSED

    def test_respond_to_undelivered_is_noop(self, engine, nudge) -> None:
        """Responding to a pending nudge changes nothing."""
        engine.respond_to_nudge(nudge.id, dismissed=True)

        assert nudge.responded_at is None
        assert nudge.dismissed is None
        assert nudge.status == NudgeStatus.PENDING

    def test_second_response_is_ignored(self, engine, nudge, clock) -> None:
        """The first response is final."""
        engine.deliver_nudge(nudge.id)
        engine.respond_to_nudge(nudge.id, dismissed=False)
        responded_at = nudge.responded_at
        clock.advance(minutes=1)

        engine.respond_to_nudge(nudge.id, dismissed=True)

        assert nudge.responded_at == responded_at
        assert nudge.dismissed is False


class TestEngineIsolation:
    """Tests that engines share no state."""

    def test_instances_are_independent(self, proactive_settings, clock, make_signal) -> None:
        """Cooldown and buffers are per engine."""
        a = ProactiveInterventionEngine(settings=proactive_settings, clock=clock)
        b = ProactiveInterventionEngine(settings=proactive_settings, clock=clock)

        assert a.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9)) is not None
        assert b.record_signal(make_signal(BehaviorSignalType.ENGAGEMENT_DROP, 0.9)) is not None
        assert b.signal_count == 1
