"""Per-session wizard storage for the HTTP layer."""

import logging
import threading
import time

from ezrecycle.logic.wizard import GuideWizard

logger = logging.getLogger(__name__)


class WizardSessionManager:
    """Manages per-session GuideWizard instances for tab-isolated forms."""

    def __init__(self):
        self._sessions: dict[str, GuideWizard] = {}
        self._last_activity: dict[str, float] = {}
        self._lock = threading.Lock()

    def get_session(self, session_id: str) -> GuideWizard:
        """Get or create the wizard for the given session_id."""
        with self._lock:
            if session_id not in self._sessions:
                self._sessions[session_id] = GuideWizard()
            self._last_activity[session_id] = time.time()
            return self._sessions[session_id]

    def drop_session(self, session_id: str):
        with self._lock:
            self._sessions.pop(session_id, None)
            self._last_activity.pop(session_id, None)

    def cleanup_stale(self, max_age_seconds: int = 7200):
        """Remove sessions inactive for more than max_age_seconds (default 2h)."""
        cutoff = time.time() - max_age_seconds
        with self._lock:
            stale = [sid for sid, t in self._last_activity.items() if t < cutoff]
            for sid in stale:
                self._sessions.pop(sid, None)
                self._last_activity.pop(sid, None)
            if stale:
                logger.info(f"Cleaned up {len(stale)} stale wizard session(s)")

    def __len__(self) -> int:
        return len(self._sessions)


session_manager = WizardSessionManager()
