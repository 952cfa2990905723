"""
Registry of live channels, so a server can tear them all down at once.
"""

import threading
import logging

from .secure_channel import SecureChannel

logger = logging.getLogger("SecurePipe.Session")


class SessionManager:
    """Track every active SecureChannel by session id."""

    def __init__(self):
        self.sessions: dict[str, SecureChannel] = {}
        self._lock = threading.Lock()

    def add(self, channel: SecureChannel):
        with self._lock:
            self.sessions[channel.session_id] = channel

    def remove(self, sid: str):
        """Forget the session and close its channel."""
        with self._lock:
            channel = self.sessions.pop(sid, None)
        if channel:
            channel.close()

    def get(self, sid: str) -> SecureChannel | None:
        with self._lock:
            return self.sessions.get(sid)

    def all_info(self) -> list[dict]:
        with self._lock:
            return [c.info() for c in self.sessions.values()]

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for c in self.sessions.values() if c.active)

    def close_all(self):
        with self._lock:
            channels = list(self.sessions.values())
            self.sessions.clear()
        for channel in channels:
            logger.info("Closing session %s", channel.session_id)
            channel.close()
