from abc import ABC, abstractmethod

from app.oauth.http import OAuthHttpClient
from app.oauth.types import OAuthConfig, OAuthTokens, OAuthUserInfo


class OAuthStrategy(ABC):

    @property
    @abstractmethod
    def provider_slug(self) -> str:
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        pass

    @property
    @abstractmethod
    def default_scopes(self) -> tuple[str, ...]:
        pass

    @abstractmethod
    def build_authorization_url(
        self, config: OAuthConfig, state: str, code_challenge: str
    ) -> str:
        pass

    @abstractmethod
    async def exchange_code(
        self,
        http: OAuthHttpClient,
        config: OAuthConfig,
        code: str,
        code_verifier: str,
    ) -> OAuthTokens | None:
        pass

    @abstractmethod
    async def fetch_user_info(
        self, http: OAuthHttpClient, config: OAuthConfig, tokens: OAuthTokens
    ) -> OAuthUserInfo | None:
        pass
