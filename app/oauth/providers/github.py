import asyncio
import logging
from typing import Any
from urllib.parse import urlencode

import aiohttp

from app.oauth.base import OAuthStrategy
from app.oauth.http import OAuthHttpClient, OAuthHttpError
from app.oauth.types import OAuthConfig, OAuthTokens, OAuthUserInfo

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
API_BASE_URL = "https://api.github.com"

_FAILURES = (aiohttp.ClientError, asyncio.TimeoutError, OAuthHttpError, ValueError, KeyError)


def _api_headers(access_token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {access_token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def primary_verified_email(emails: list[dict[str, Any]]) -> str | None:
    for entry in emails:
        if entry.get("primary") and entry.get("verified"):
            return entry.get("email")
    return None


def user_info_from_profile(
    profile: dict[str, Any], email: str | None = None
) -> OAuthUserInfo:
    return OAuthUserInfo(
        provider="github",
        uid=str(profile["id"]),
        name=profile.get("name") or profile.get("login"),
        nickname=profile.get("login"),
        email=profile.get("email") or email,
        image=profile.get("avatar_url"),
        profile_url=profile.get("html_url"),
        raw=profile,
    )


class GitHubStrategy(OAuthStrategy):

    @property
    def provider_slug(self) -> str:
        return "github"

    @property
    def display_name(self) -> str:
        return "GitHub"

    @property
    def default_scopes(self) -> tuple[str, ...]:
        return ("user:email",)

    def build_authorization_url(
        self, config: OAuthConfig, state: str, code_challenge: str
    ) -> str:
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "scope": " ".join(config.scopes),
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
            "allow_signup": "true",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(
        self,
        http: OAuthHttpClient,
        config: OAuthConfig,
        code: str,
        code_verifier: str,
    ) -> OAuthTokens | None:
        logger.debug("Exchanging code for tokens with GitHub")
        try:
            payload = await http.post_form(
                TOKEN_URL,
                {
                    "client_id": config.client_id,
                    "client_secret": config.client_secret,
                    "code": code,
                    "redirect_uri": config.redirect_uri,
                    "code_verifier": code_verifier,
                },
            )
        except _FAILURES as e:
            logger.error(f"GitHub token exchange failed: {e}")
            return None

        if not isinstance(payload, dict):
            logger.error("GitHub token exchange returned an empty response")
            return None

        # GitHub reports token errors with a 200 status.
        if "error" in payload:
            logger.error(
                "GitHub token exchange rejected: %s (%s)",
                payload.get("error"),
                payload.get("error_description"),
            )
            return None

        try:
            return OAuthTokens(
                access_token=payload["access_token"],
                token_type=payload.get("token_type", "bearer"),
                scope=payload.get("scope"),
                refresh_token=payload.get("refresh_token"),
                expires_in=payload.get("expires_in"),
            )
        except (KeyError, ValueError) as e:
            logger.error(f"GitHub token response malformed: {e}")
            return None

    async def fetch_user_info(
        self, http: OAuthHttpClient, config: OAuthConfig, tokens: OAuthTokens
    ) -> OAuthUserInfo | None:
        headers = _api_headers(tokens.access_token)
        try:
            profile = await http.get_json(f"{API_BASE_URL}/user", headers=headers)
            email = None
            if not profile.get("email"):
                email = await self._fetch_primary_email(http, headers)
            return user_info_from_profile(profile, email)
        except _FAILURES as e:
            logger.error(f"GitHub user info fetch failed: {e}")
            return None

    async def _fetch_primary_email(
        self, http: OAuthHttpClient, headers: dict[str, str]
    ) -> str | None:
        """Primary verified address from /user/emails, or None when unavailable."""
        try:
            emails = await http.get_json(f"{API_BASE_URL}/user/emails", headers=headers)
            return primary_verified_email(emails)
        except _FAILURES + (TypeError, AttributeError) as e:
            logger.warning(f"GitHub email lookup failed, continuing without email: {e}")
            return None
