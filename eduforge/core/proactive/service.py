# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Proactive service owning one engine per learner session.

Engines are not designed for concurrent mutation. When the engine is
deployed behind a service that handles many sessions at once, this
service confines each session's engine behind its own lock, so calls
for one session are serialized while different sessions proceed
independently.

Usage:
    service = ProactiveService()

    # Telemetry producers
    nudge = service.record_signal("session-123", signal)

    # Delivery transport
    for nudge in service.get_pending_nudges("session-123"):
        push(nudge.to_event(user_id="student-1"))
        service.deliver_nudge("session-123", nudge.id)

    # Learner acted on the nudge
    service.respond_to_nudge("session-123", nudge_id, dismissed=False)

    # Session ended
    service.end_session("session-123")
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from eduforge.core.config import ProactiveSettings, get_settings
from eduforge.core.proactive.engine import ProactiveInterventionEngine
from eduforge.core.proactive.nudges import Nudge
from eduforge.core.proactive.signals import BehaviorSignal
from eduforge.utils.datetime import Clock, utc_now
from eduforge.utils.logging import bound_context, get_logger

logger = get_logger(__name__)

EngineFactory = Callable[[], ProactiveInterventionEngine]


class ProactiveServiceError(Exception):
    """Exception raised for proactive service operations."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


@dataclass
class _SessionSlot:
    engine: ProactiveInterventionEngine
    lock: threading.Lock = field(default_factory=threading.Lock)


class ProactiveService:
    """Registry of per-session intervention engines.

    Attributes:
        settings: Settings used for engines created by the default factory.
    """

    def __init__(
        self,
        settings: ProactiveSettings | None = None,
        engine_factory: EngineFactory | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the proactive service.

        Args:
            settings: Engine settings. Defaults to get_settings().proactive.
            engine_factory: Builds a fresh engine for a new session.
                Overrides settings and clock when given.
            clock: Time source passed to engines built by the default factory.
        """
        self.settings = settings or get_settings().proactive
        self._engine_factory: EngineFactory = engine_factory or (
            lambda: ProactiveInterventionEngine(settings=self.settings, clock=clock)
        )
        self._sessions: dict[str, _SessionSlot] = {}
        self._registry_lock = threading.Lock()

        logger.info(
            "ProactiveService initialized",
            cooldown_minutes=self.settings.cooldown_minutes,
            lookback_minutes=self.settings.lookback_minutes,
        )

    @property
    def active_sessions(self) -> list[str]:
        with self._registry_lock:
            return list(self._sessions)

    @staticmethod
    def _validate_session_id(session_id: str) -> None:
        if not session_id:
            raise ProactiveServiceError("session_id must be a non-empty string")

    def _find_slot(self, session_id: str) -> _SessionSlot | None:
        self._validate_session_id(session_id)
        with self._registry_lock:
            return self._sessions.get(session_id)

    def _ensure_slot(self, session_id: str) -> _SessionSlot:
        self._validate_session_id(session_id)
        with self._registry_lock:
            slot = self._sessions.get(session_id)
            if slot is None:
                slot = _SessionSlot(engine=self._engine_factory())
                self._sessions[session_id] = slot
                logger.debug("Created engine for session", session_id=session_id)
            return slot

    @contextmanager
    def _session(
        self,
        session_id: str,
        create: bool = False,
    ) -> Iterator[ProactiveInterventionEngine | None]:
        slot = self._ensure_slot(session_id) if create else self._find_slot(session_id)
        if slot is None:
            yield None
            return

        with slot.lock, bound_context(session_id=session_id):
            yield slot.engine

    def get_engine(self, session_id: str) -> ProactiveInterventionEngine:
        """Return the session's engine, creating it on first use.

        The returned engine is not locked; prefer the service methods
        when other threads may touch the same session.
        """
        return self._ensure_slot(session_id).engine

    def record_signal(self, session_id: str, signal: BehaviorSignal) -> Nudge | None:
        """Record a signal for a session, creating the session if needed.

        Args:
            session_id: Learner session identifier.
            signal: Behavior signal.

        Returns:
            New pending Nudge, or None.

        Raises:
            ProactiveServiceError: If session_id is empty.
        """
        with self._session(session_id, create=True) as engine:
            return engine.record_signal(signal)

    def get_pending_nudges(self, session_id: str) -> list[Nudge]:
        with self._session(session_id) as engine:
            return engine.get_pending_nudges() if engine else []

    def deliver_nudge(self, session_id: str, nudge_id: str) -> None:
        with self._session(session_id) as engine:
            if engine:
                engine.deliver_nudge(nudge_id)

    def respond_to_nudge(self, session_id: str, nudge_id: str, dismissed: bool) -> None:
        with self._session(session_id) as engine:
            if engine:
                engine.respond_to_nudge(nudge_id, dismissed)

    def get_delivered_nudges(self, session_id: str) -> list[Nudge]:
        with self._session(session_id) as engine:
            return engine.get_delivered_nudges() if engine else []

    def end_session(self, session_id: str) -> bool:
        """Drop a session's engine.

        Returns:
            True if the session existed.
        """
        with self._registry_lock:
            slot = self._sessions.pop(session_id, None)

        if slot is None:
            return False

        with slot.lock:
            delivered = len(slot.engine.get_delivered_nudges())

        logger.info("Session ended", session_id=session_id, delivered=delivered)
        return True


# Singleton instance
_proactive_service: ProactiveService | None = None


def get_proactive_service(settings: ProactiveSettings | None = None) -> ProactiveService:
    """Get or create the proactive service singleton.

    Only the session registry is shared; every session still gets its
    own engine.

    Args:
        settings: Engine settings, used on first creation only.

    Returns:
        ProactiveService instance.
    """
    global _proactive_service
    if _proactive_service is None:
        _proactive_service = ProactiveService(settings=settings)
    return _proactive_service


def reset_proactive_service() -> None:
    """Reset the proactive service singleton. Useful for testing."""
    global _proactive_service
    _proactive_service = None
