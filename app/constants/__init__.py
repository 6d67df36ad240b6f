from app.constants.auth_errors import AUTH_ERROR_MESSAGES, AuthErrorCode

__all__ = [
    "AuthErrorCode",
    "AUTH_ERROR_MESSAGES",
]
