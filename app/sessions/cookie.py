import hashlib
import hmac

SESSION_COOKIE_NAME = "vestibule_session"


class SessionCookieSigner:

    def __init__(self, secret_key_base: str):
        self._key = secret_key_base.encode()

    def _signature(self, session_id: str) -> str:
        return hmac.new(self._key, session_id.encode(), hashlib.sha256).hexdigest()

    def sign(self, session_id: str) -> str:
        return f"{session_id}.{self._signature(session_id)}"

    def unsign(self, value: str) -> str | None:
        session_id, sep, signature = value.rpartition(".")
        if not sep or not session_id:
            return None
        expected = self._signature(session_id)
        if not hmac.compare_digest(signature.encode(), expected.encode()):
            return None
        return session_id
