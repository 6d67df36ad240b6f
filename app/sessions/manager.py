import logging

from fastapi import Request, Response

from app.sessions.cookie import SESSION_COOKIE_NAME, SessionCookieSigner
from app.sessions.store import SessionRecord, SessionStore

logger = logging.getLogger(__name__)


class SessionManager:

    def __init__(self, store: SessionStore, signer: SessionCookieSigner, secure: bool = False):
        self._store = store
        self._signer = signer
        self._secure = secure

    @property
    def store(self) -> SessionStore:
        return self._store

    def load(self, request: Request) -> SessionRecord:
        cookie = request.cookies.get(SESSION_COOKIE_NAME)
        if cookie:
            session_id = self._signer.unsign(cookie)
            if session_id is None:
                logger.warning("Rejected session cookie with a bad signature")
            else:
                record = self._store.get(session_id)
                if record is not None:
                    return record
        return self._store.create()

    def commit(self, response: Response, record: SessionRecord) -> None:
        self._store.save(record)
        response.set_cookie(
            key=SESSION_COOKIE_NAME,
            value=self._signer.sign(record.session_id),
            max_age=self._store.ttl_seconds,
            httponly=True,
            secure=self._secure,
            samesite="lax",
            path="/",
        )

    def destroy(self, response: Response, record: SessionRecord) -> None:
        self._store.delete(record.session_id)
        response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")

    def renew(self, record: SessionRecord) -> SessionRecord:
        """Move the session data to a fresh id, e.g. after signing in."""
        self._store.delete(record.session_id)
        renewed = self._store.create()
        renewed.data = dict(record.data)
        return renewed
