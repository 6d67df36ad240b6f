import logging
from collections.abc import Iterator
from dataclasses import dataclass

from app.core.exceptions import NoProvidersConfiguredError
from app.core.settings import Settings
from app.oauth.base import OAuthStrategy
from app.oauth.providers import GitHubStrategy, MicrosoftStrategy
from app.oauth.types import OAuthConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    strategy: OAuthStrategy
    config: OAuthConfig

    @property
    def provider_slug(self) -> str:
        return self.strategy.provider_slug


class OAuthProviderRegistry:
    """Registry of configured OAuth providers, keyed by slug."""

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}

    def register(self, strategy: OAuthStrategy, config: OAuthConfig) -> None:
        """Register a strategy together with its client configuration."""
        self._entries[strategy.provider_slug] = RegistryEntry(strategy, config)

    def get(self, provider_slug: str) -> RegistryEntry | None:
        """Get a registry entry by provider slug."""
        return self._entries.get(provider_slug)

    def list_providers(self) -> list[str]:
        """List all registered provider slugs."""
        return list(self._entries.keys())

    def entries(self) -> Iterator[RegistryEntry]:
        return iter(self._entries.values())

    def __contains__(self, provider_slug: object) -> bool:
        return provider_slug in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _register_if_configured(
    registry: OAuthProviderRegistry,
    strategy: OAuthStrategy,
    client_id: str | None,
    client_secret: str | None,
    settings: Settings,
) -> None:
    if not (client_id and client_secret):
        logger.debug(
            "Skipping %s: client id and secret are not both set",
            strategy.provider_slug,
        )
        return

    config = OAuthConfig(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=settings.callback_url(strategy.provider_slug),
        scopes=strategy.default_scopes,
    )
    registry.register(strategy, config)
    logger.info(
        "Registered %s provider with callback %s",
        strategy.display_name,
        config.redirect_uri,
    )


def build_provider_registry(settings: Settings) -> OAuthProviderRegistry:
    registry = OAuthProviderRegistry()

    _register_if_configured(
        registry,
        GitHubStrategy(),
        settings.github_client_id,
        settings.github_client_secret,
        settings,
    )
    _register_if_configured(
        registry,
        MicrosoftStrategy(tenant=settings.microsoft_tenant),
        settings.microsoft_client_id,
        settings.microsoft_client_secret,
        settings,
    )

    if len(registry) == 0:
        raise NoProvidersConfiguredError(
            "No OAuth provider is configured. Set GITHUB_CLIENT_ID and "
            "GITHUB_CLIENT_SECRET, or MICROSOFT_CLIENT_ID and "
            "MICROSOFT_CLIENT_SECRET."
        )
    return registry
