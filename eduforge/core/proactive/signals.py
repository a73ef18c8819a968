# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Behavioral signals and the per-session signal buffer.

Signals are produced upstream (interaction timing, grading, session
activity monitors, confidence tracking, spaced repetition, streak
tracking) with their intensity already computed. The engine only
buffers them and lets detectors inspect the recent window.
"""

from collections import deque
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any

from eduforge.utils.datetime import ensure_utc, utc_now

DEFAULT_BUFFER_CAPACITY = 100
DEFAULT_LOOKBACK = timedelta(minutes=10)


class BehaviorSignalType(str, Enum):
    """Kinds of behavioral telemetry the engine understands."""

    HESITATION = "hesitation"  # Long pause before answering
    RAPID_WRONG = "rapid_wrong"  # Quick wrong answers (guessing)
    ERROR_STREAK = "error_streak"  # Multiple consecutive errors
    ENGAGEMENT_DROP = "engagement_drop"  # Reduced interaction frequency
    CONFIDENCE_DIVERGENCE = "confidence_divergence"  # Student vs AI confidence gap
    PROCRASTINATION = "procrastination"  # Extended idle time during session
    MODE_AVOIDANCE = "mode_avoidance"  # Avoiding Debug/Exam mode despite need
    TIME_OF_DAY = "time_of_day"  # Studying at unusual times
    FRUSTRATION = "frustration"  # Rapid input changes, deletions
    MASTERY_PLATEAU = "mastery_plateau"  # No improvement over multiple sessions
    REVIEW_OVERDUE = "review_overdue"  # Spaced repetition review is overdue
    STREAK_AT_RISK = "streak_at_risk"  # Streak about to break


def coerce_signal_type(value: BehaviorSignalType | str) -> BehaviorSignalType | str:
    """Map a raw type string onto BehaviorSignalType when it is a known kind.

    Unknown strings are kept as-is; no detector will match them.
    """
    if isinstance(value, BehaviorSignalType):
        return value
    try:
        return BehaviorSignalType(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class BehaviorSignal:
    """A single timestamped unit of behavioral telemetry.

    Attributes:
        type: Kind of signal. Unknown kinds are accepted.
        intensity: Signal strength, expected in [0, 1].
        timestamp: When the behavior was observed (UTC).
        metadata: Free-form details. Detectors read it defensively.
    """

    type: BehaviorSignalType | str
    intensity: float
    timestamp: datetime = field(default_factory=utc_now)
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", coerce_signal_type(self.type))
        # Missing or non-datetime timestamps mean "observed now"
        timestamp = self.timestamp if isinstance(self.timestamp, datetime) else utc_now()
        object.__setattr__(self, "timestamp", ensure_utc(timestamp))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))


class SignalBuffer:
    """Bounded, time-windowed store of recent signals for one session.

    Insertion beyond capacity evicts the oldest signal (FIFO). Window
    queries return signals strictly younger than the lookback, in
    insertion order.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_BUFFER_CAPACITY,
        lookback: timedelta = DEFAULT_LOOKBACK,
    ) -> None:
        self.capacity = capacity
        self.lookback = lookback
        self._signals: deque[BehaviorSignal] = deque(maxlen=capacity)

    def record(self, signal: BehaviorSignal) -> None:
        """Append a signal, dropping the oldest one when full."""
        self._signals.append(signal)

    def windowed(self, now: datetime) -> list[BehaviorSignal]:
        """Return signals observed within the lookback window ending at now."""
        return [s for s in self._signals if now - s.timestamp < self.lookback]

    def clear(self) -> None:
        self._signals.clear()

    def __len__(self) -> int:
        return len(self._signals)

    def __iter__(self) -> Iterator[BehaviorSignal]:
        return iter(self._signals)
