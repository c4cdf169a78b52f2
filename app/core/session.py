"""Per-user session context and the registry that owns its lifecycle.

A session is opened at login (or lazily on the first request carrying a valid
token), handed to views through FastAPI dependencies, and closed at logout.
"""
import hashlib
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from app.config import settings
from app.config.permissions_config import role_has_permission

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    user_id: str
    email: str
    role: str
    access_token: str = field(repr=False)
    profile: Dict[str, Any] = field(default_factory=dict)
    user_metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        first = self.profile.get("first_name") or ""
        last = self.profile.get("last_name") or ""
        return f"{first} {last}".strip() or self.email

    @property
    def is_teacher(self) -> bool:
        return self.role == "teacher"

    def has_permission(self, permission: str) -> bool:
        return role_has_permission(self.role, permission)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.user_id,
            "email": self.email,
            "role": self.role,
            "display_name": self.display_name,
            "profile": self.profile,
        }


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class SessionRegistry:
    """Thread-safe token -> SessionContext map with a short TTL."""

    def __init__(self, ttl_sec: int, max_size: int):
        self.ttl_sec = ttl_sec
        self.max_size = max_size
        self._lock = threading.Lock()
        self._sessions: Dict[str, tuple] = {}

    def open(self, session: SessionContext) -> SessionContext:
        key = _token_key(session.access_token)
        expiry = time.monotonic() + self.ttl_sec
        with self._lock:
            if key not in self._sessions and len(self._sessions) >= self.max_size:
                self._evict_expired()
            if key in self._sessions or len(self._sessions) < self.max_size:
                self._sessions[key] = (session, expiry)
        logger.debug(f"Opened session for user {session.user_id}")
        return session

    def get(self, token: str) -> Optional[SessionContext]:
        key = _token_key(token)
        with self._lock:
            entry = self._sessions.get(key)
            if entry is None:
                return None
            session, expiry = entry
            if time.monotonic() >= expiry:
                del self._sessions[key]
                return None
            return session

    def close(self, token: str) -> bool:
        with self._lock:
            entry = self._sessions.pop(_token_key(token), None)
        if entry:
            logger.debug(f"Closed session for user {entry[0].user_id}")
        return entry is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _evict_expired(self) -> None:
        now = time.monotonic()
        for key in [k for k, (_, expiry) in self._sessions.items() if now >= expiry]:
            del self._sessions[key]


session_registry = SessionRegistry(
    ttl_sec=settings.session_cache_ttl_sec,
    max_size=settings.session_cache_max_size,
)
