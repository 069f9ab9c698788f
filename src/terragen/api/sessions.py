"""
Session manager for generation runs.

Each session wraps a Generator with its own height map, supporting
tick-by-tick stepping, synchronous runs, and background runs in a
worker thread. Sessions live in memory only.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any

from terragen.core.config import GeneratorConfig
from terragen.core.generator import Generator

logger = logging.getLogger(__name__)


@dataclass
class GeneratorSession:
    """A generation run and its scheduling state."""

    id: str
    name: str
    config: GeneratorConfig
    generator: Generator
    status: str = "created"  # created | running | completed | error

    def refresh_status(self) -> None:
        if self.status == "error":
            return
        if self.generator.is_over():
            self.status = "completed"
        elif self.generator.is_started():
            self.status = "running"
        else:
            self.status = "created"


class SessionManager:
    """Manages multiple in-memory generation sessions."""

    def __init__(self, max_tick_batch: int = 100_000):
        self.sessions: dict[str, GeneratorSession] = {}
        self.max_tick_batch = max_tick_batch

        # Track session IDs currently running in background threads
        self._running: set[str] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_session(
        self,
        config: GeneratorConfig | None = None,
        script: str | None = None,
        name: str | None = None,
    ) -> GeneratorSession:
        """Create a new session, optionally loading a script."""
        if config is None:
            config = GeneratorConfig()

        session_id = uuid.uuid4().hex[:8]
        generator = Generator.from_config(config)
        if script is not None:
            generator.loads(script)

        session = GeneratorSession(
            id=session_id,
            name=name or config.experiment_name,
            config=config,
            generator=generator,
        )
        self.sessions[session_id] = session
        logger.info("Created session %s (%s)", session_id, session.name)
        return session

    def get_session(self, session_id: str) -> GeneratorSession:
        """Get a session by ID. Raises KeyError if not found."""
        if session_id not in self.sessions:
            raise KeyError(f"Session '{session_id}' not found")
        return self.sessions[session_id]

    def list_sessions(self) -> list[dict[str, Any]]:
        return [self.summary(s) for s in self.sessions.values()]

    def delete_session(self, session_id: str) -> None:
        if session_id not in self.sessions:
            raise KeyError(f"Session '{session_id}' not found")
        del self.sessions[session_id]
        self._running.discard(session_id)

    def is_running(self, session_id: str) -> bool:
        return session_id in self._running

    def load_script(self, session_id: str, script: str) -> GeneratorSession:
        """Replace a session's script (this resets the generator)."""
        session = self.get_session(session_id)
        session.generator.loads(script)
        session.refresh_status()
        return session

    def step(self, session_id: str, n: int = 1) -> GeneratorSession:
        """Advance a session by N ticks."""
        session = self.get_session(session_id)
        if session_id in self._running:
            return session  # Background run in progress, don't interfere

        for _ in range(min(n, self.max_tick_batch)):
            session.generator.tick()
            if session.generator.is_over():
                break
        session.refresh_status()
        return session

    def run_full(self, session_id: str) -> GeneratorSession:
        """Run a session to completion in the calling thread."""
        session = self.get_session(session_id)
        if session_id in self._running:
            return session
        session.generator.run_all()
        session.refresh_status()
        return session

    def run_full_async(self, session_id: str) -> GeneratorSession:
        """Start running a session in a background thread."""
        session = self.get_session(session_id)
        if session_id in self._running:
            return session  # Already running, no-op
        if session.status == "completed":
            return session

        session.status = "running"
        self._running.add(session_id)

        def _worker():
            try:
                session.generator.run_all()
                session.refresh_status()
            except Exception:
                logger.exception("Background run failed for %s", session_id)
                session.status = "error"
            finally:
                self._running.discard(session_id)

        t = threading.Thread(target=_worker, daemon=True)
        t.start()
        return session

    def reset_session(self, session_id: str) -> GeneratorSession:
        """Reset a session's generator and height map."""
        session = self.get_session(session_id)
        session.generator.reset()
        session.status = "created"
        return session

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------

    @staticmethod
    def summary(session: GeneratorSession) -> dict[str, Any]:
        gen = session.generator
        return {
            "id": session.id,
            "name": session.name,
            "status": session.status,
            "tick_count": gen.tick_count,
            "current_phase": gen.current_phase,
            "phases_count": gen.phases_count,
            "live_agents": gen.live_agents,
        }

    def describe(self, session: GeneratorSession) -> dict[str, Any]:
        data = self.summary(session)
        data["is_started"] = session.generator.is_started()
        data["is_over"] = session.generator.is_over()
        data["grid_size"] = session.generator.heightmap_size
        data["config"] = session.config.to_dict()
        return data
