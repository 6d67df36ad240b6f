from enum import Enum


class AuthErrorCode(str, Enum):
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    PROVIDER_DENIED = "PROVIDER_DENIED"
    MISSING_CALLBACK_PARAMS = "MISSING_CALLBACK_PARAMS"

    INVALID_OAUTH_STATE = "INVALID_OAUTH_STATE"
    OAUTH_TOKEN_EXCHANGE_FAILED = "OAUTH_TOKEN_EXCHANGE_FAILED"
    OAUTH_USER_INFO_FAILED = "OAUTH_USER_INFO_FAILED"

    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"


AUTH_ERROR_MESSAGES: dict[AuthErrorCode, str] = {
    AuthErrorCode.PROVIDER_NOT_FOUND: "OAuth provider not found or not configured.",
    AuthErrorCode.PROVIDER_DENIED: "The provider did not authorize the sign-in.",
    AuthErrorCode.MISSING_CALLBACK_PARAMS: "The callback is missing the code or state parameter.",
    AuthErrorCode.INVALID_OAUTH_STATE: "Invalid OAuth state. Please try again.",
    AuthErrorCode.OAUTH_TOKEN_EXCHANGE_FAILED: "Failed to exchange authorization code for tokens.",
    AuthErrorCode.OAUTH_USER_INFO_FAILED: "Failed to fetch user information from provider.",
    AuthErrorCode.NOT_AUTHENTICATED: "You are not signed in.",
}
