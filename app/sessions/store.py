import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    session_id: str
    expires_at: float
    data: dict[str, Any] = field(default_factory=dict)

    def is_expired(self, now: float | None = None) -> bool:
        return self.expires_at <= (time.time() if now is None else now)


class SessionStore:
    """In-memory session table shared by every request of the process."""

    def __init__(self, ttl_seconds: int = 3600, purge_interval_seconds: float = 60.0):
        self._ttl_seconds = ttl_seconds
        self._purge_interval_seconds = purge_interval_seconds
        self._next_purge_at = 0.0
        self._records: dict[str, SessionRecord] = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def create(self) -> SessionRecord:
        # Only saved sessions enter the table.
        return SessionRecord(
            session_id=secrets.token_urlsafe(32),
            expires_at=time.time() + self._ttl_seconds,
        )

    def get(self, session_id: str) -> SessionRecord | None:
        record = self._records.get(session_id)
        if record is None:
            return None
        if record.is_expired():
            logger.debug("Session expired, dropping it")
            del self._records[session_id]
            return None
        return record

    def save(self, record: SessionRecord) -> None:
        now = time.time()
        if now >= self._next_purge_at:
            self.purge_expired()
            self._next_purge_at = now + self._purge_interval_seconds
        record.expires_at = now + self._ttl_seconds
        self._records[record.session_id] = record

    def delete(self, session_id: str) -> None:
        self._records.pop(session_id, None)

    def purge_expired(self) -> int:
        now = time.time()
        expired = [sid for sid, rec in self._records.items() if rec.is_expired(now)]
        for sid in expired:
            del self._records[sid]
        if expired:
            logger.info("Purged %d expired sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)
