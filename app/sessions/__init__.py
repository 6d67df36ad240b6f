from app.sessions.cookie import SESSION_COOKIE_NAME, SessionCookieSigner
from app.sessions.manager import SessionManager
from app.sessions.store import SessionRecord, SessionStore

__all__ = [
    "SESSION_COOKIE_NAME",
    "SessionCookieSigner",
    "SessionManager",
    "SessionRecord",
    "SessionStore",
]
