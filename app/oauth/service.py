import logging
import time
from dataclasses import dataclass

from app.constants.auth_errors import AUTH_ERROR_MESSAGES, AuthErrorCode
from app.oauth.http import OAuthHttpClient
from app.oauth.registry import OAuthProviderRegistry, RegistryEntry
from app.oauth.types import OAuthUserInfo
from app.sessions.store import SessionRecord
from app.utils.oauth_state import (
    code_challenge,
    generate_code_verifier,
    generate_state,
    states_match,
)

logger = logging.getLogger(__name__)

PENDING_AUTH_KEY = "oauth_pending"
USER_KEY = "user"


@dataclass
class OAuthResult:
    success: bool
    data: OAuthUserInfo | None = None
    error_code: AuthErrorCode | None = None

    @property
    def error_message(self) -> str | None:
        if self.error_code:
            return AUTH_ERROR_MESSAGES.get(self.error_code)
        return None


class OAuthService:

    def __init__(
        self,
        registry: OAuthProviderRegistry,
        http_client: OAuthHttpClient,
        state_ttl_seconds: int = 600,
    ):
        self._registry = registry
        self._http_client = http_client
        self._state_ttl_seconds = state_ttl_seconds

    @property
    def registry(self) -> OAuthProviderRegistry:
        return self._registry

    def get_entry(self, provider_slug: str) -> RegistryEntry | None:
        entry = self._registry.get(provider_slug)
        if entry is None:
            logger.warning(f"OAuth provider not registered: {provider_slug}")
        return entry

    def begin_authorization(self, entry: RegistryEntry, session: SessionRecord) -> str:
        state = generate_state()
        code_verifier = generate_code_verifier()
        session.data[PENDING_AUTH_KEY] = {
            "provider": entry.provider_slug,
            "state": state,
            "code_verifier": code_verifier,
            "exp": int(time.time()) + self._state_ttl_seconds,
        }
        logger.debug(f"Starting authorization with provider: {entry.provider_slug}")
        return entry.strategy.build_authorization_url(
            entry.config, state, code_challenge(code_verifier)
        )

    def _consume_pending(
        self, entry: RegistryEntry, session: SessionRecord, state: str
    ) -> str | None:
        """Pop the pending authorization and return its code verifier if valid."""
        pending = session.data.pop(PENDING_AUTH_KEY, None)
        if not pending:
            logger.warning("Callback received without a pending authorization")
            return None
        if pending.get("provider") != entry.provider_slug:
            logger.warning(
                "Callback provider %s does not match pending provider %s",
                entry.provider_slug,
                pending.get("provider"),
            )
            return None
        if pending.get("exp", 0) < int(time.time()):
            logger.warning("Pending authorization for %s expired", entry.provider_slug)
            return None
        if not states_match(pending.get("state", ""), state):
            logger.warning("OAuth state mismatch for %s", entry.provider_slug)
            return None
        return pending["code_verifier"]

    async def complete_authorization(
        self,
        entry: RegistryEntry,
        session: SessionRecord,
        code: str,
        state: str,
    ) -> OAuthResult:
        code_verifier = self._consume_pending(entry, session, state)
        if code_verifier is None:
            return OAuthResult(
                success=False, error_code=AuthErrorCode.INVALID_OAUTH_STATE
            )

        strategy = entry.strategy
        logger.debug(
            f"Exchanging code for tokens with provider: {entry.provider_slug}"
        )
        tokens = await strategy.exchange_code(
            self._http_client, entry.config, code, code_verifier
        )
        if tokens is None:
            logger.warning(f"Token exchange failed for provider: {entry.provider_slug}")
            return OAuthResult(
                success=False,
                error_code=AuthErrorCode.OAUTH_TOKEN_EXCHANGE_FAILED,
            )

        user_info = await strategy.fetch_user_info(
            self._http_client, entry.config, tokens
        )
        if user_info is None:
            logger.warning(
                f"Failed to fetch user info from provider: {entry.provider_slug}"
            )
            return OAuthResult(
                success=False,
                error_code=AuthErrorCode.OAUTH_USER_INFO_FAILED,
            )
        logger.info(
            f"Signed in {user_info.provider} user {user_info.uid}"
        )
        return OAuthResult(success=True, data=user_info)

    @staticmethod
    def sign_in(session: SessionRecord, user_info: OAuthUserInfo) -> None:
        session.data[USER_KEY] = user_info.model_dump(mode="json", exclude={"raw"})

    @staticmethod
    def current_user(session: SessionRecord) -> OAuthUserInfo | None:
        user = session.data.get(USER_KEY)
        if user is None:
            return None
        return OAuthUserInfo.model_validate(user)
