import asyncio
import logging
from typing import Any
from urllib.parse import urlencode

import aiohttp
import jwt

from app.oauth.base import OAuthStrategy
from app.oauth.http import OAuthHttpClient, OAuthHttpError
from app.oauth.types import OAuthConfig, OAuthTokens, OAuthUserInfo

logger = logging.getLogger(__name__)

LOGIN_BASE_URL = "https://login.microsoftonline.com"
GRAPH_ME_URL = "https://graph.microsoft.com/v1.0/me"

_FAILURES = (aiohttp.ClientError, asyncio.TimeoutError, OAuthHttpError, ValueError, KeyError)


def id_token_claims(id_token: str | None) -> dict[str, Any]:
    """Read claims from an id_token received directly from the token endpoint."""
    if not id_token:
        return {}
    try:
        return jwt.decode(id_token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        logger.warning(f"Ignoring undecodable Microsoft id_token: {e}")
        return {}


def user_info_from_profile(
    profile: dict[str, Any], claims: dict[str, Any] | None = None
) -> OAuthUserInfo:
    claims = claims or {}
    email = (
        profile.get("mail")
        or profile.get("userPrincipalName")
        or claims.get("email")
        or claims.get("preferred_username")
    )
    return OAuthUserInfo(
        provider="microsoft",
        uid=str(profile["id"]),
        name=profile.get("displayName") or claims.get("name"),
        nickname=profile.get("userPrincipalName") or claims.get("preferred_username"),
        email=email,
        raw=profile,
    )


class MicrosoftStrategy(OAuthStrategy):

    def __init__(self, tenant: str = "common"):
        self._tenant = tenant

    @property
    def provider_slug(self) -> str:
        return "microsoft"

    @property
    def display_name(self) -> str:
        return "Microsoft"

    @property
    def default_scopes(self) -> tuple[str, ...]:
        return ("openid", "profile", "email", "User.Read")

    @property
    def authorize_url(self) -> str:
        return f"{LOGIN_BASE_URL}/{self._tenant}/oauth2/v2.0/authorize"

    @property
    def token_url(self) -> str:
        return f"{LOGIN_BASE_URL}/{self._tenant}/oauth2/v2.0/token"

    def build_authorization_url(
        self, config: OAuthConfig, state: str, code_challenge: str
    ) -> str:
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "response_type": "code",
            "response_mode": "query",
            "scope": " ".join(config.scopes),
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(
        self,
        http: OAuthHttpClient,
        config: OAuthConfig,
        code: str,
        code_verifier: str,
    ) -> OAuthTokens | None:
        logger.debug("Exchanging code for tokens with Microsoft (tenant=%s)", self._tenant)
        try:
            payload = await http.post_form(
                self.token_url,
                {
                    "client_id": config.client_id,
                    "client_secret": config.client_secret,
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": config.redirect_uri,
                    "code_verifier": code_verifier,
                    "scope": " ".join(config.scopes),
                },
            )
            return OAuthTokens(
                access_token=payload["access_token"],
                token_type=payload.get("token_type", "Bearer"),
                refresh_token=payload.get("refresh_token"),
                expires_in=payload.get("expires_in"),
                scope=payload.get("scope"),
                id_token=payload.get("id_token"),
            )
        except _FAILURES as e:
            logger.error(f"Microsoft token exchange failed: {e}")
            return None

    async def fetch_user_info(
        self, http: OAuthHttpClient, config: OAuthConfig, tokens: OAuthTokens
    ) -> OAuthUserInfo | None:
        try:
            profile = await http.get_json(
                GRAPH_ME_URL,
                headers={"Authorization": f"Bearer {tokens.access_token}"},
            )
            return user_info_from_profile(profile, id_token_claims(tokens.id_token))
        except _FAILURES as e:
            logger.error(f"Microsoft user info fetch failed: {e}")
            return None
