from app.oauth.base import OAuthStrategy
from app.oauth.http import OAuthHttpClient, OAuthHttpError
from app.oauth.registry import (
    OAuthProviderRegistry,
    RegistryEntry,
    build_provider_registry,
)
from app.oauth.service import OAuthResult, OAuthService
from app.oauth.types import OAuthConfig, OAuthTokens, OAuthUserInfo

__all__ = [
    "OAuthStrategy",
    "OAuthConfig",
    "OAuthTokens",
    "OAuthUserInfo",
    "OAuthHttpClient",
    "OAuthHttpError",
    "OAuthProviderRegistry",
    "RegistryEntry",
    "build_provider_registry",
    "OAuthResult",
    "OAuthService",
]
