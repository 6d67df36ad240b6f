from urllib.parse import urlencode

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.settings import Settings
from app.main import create_app
from app.oauth.base import OAuthStrategy
from app.oauth.registry import OAuthProviderRegistry
from app.oauth.types import OAuthConfig, OAuthTokens, OAuthUserInfo

ENV_VARS = (
    "PORT",
    "HOST",
    "SECRET_KEY_BASE",
    "GITHUB_CLIENT_ID",
    "GITHUB_CLIENT_SECRET",
    "MICROSOFT_CLIENT_ID",
    "MICROSOFT_CLIENT_SECRET",
    "MICROSOFT_TENANT",
)


class FakeStrategy(OAuthStrategy):
    """In-memory provider used by the HTTP tests."""

    authorize_endpoint = "https://fake.example/authorize"

    def __init__(self, slug: str = "fake") -> None:
        self._slug = slug
        self.tokens: OAuthTokens | None = OAuthTokens(access_token="fake-access")
        self.user: OAuthUserInfo | None = OAuthUserInfo(
            provider="fake",
            uid="42",
            name="Ada Lovelace",
            nickname="ada",
            email="ada@example.com",
        )
        self.exchanged: list[tuple[str, str]] = []

    @property
    def provider_slug(self) -> str:
        return self._slug

    @property
    def display_name(self) -> str:
        return self._slug.title()

    @property
    def default_scopes(self) -> tuple[str, ...]:
        return ("profile",)

    def build_authorization_url(
        self, config: OAuthConfig, state: str, code_challenge: str
    ) -> str:
        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "state": state,
            "code_challenge": code_challenge,
        }
        return f"{self.authorize_endpoint}?{urlencode(params)}"

    async def exchange_code(self, http, config, code, code_verifier):
        self.exchanged.append((code, code_verifier))
        return self.tokens

    async def fetch_user_info(self, http, config, tokens):
        return self.user


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings(secret_key_base="test-secret-key-base")


@pytest.fixture
def fake_strategy() -> FakeStrategy:
    return FakeStrategy()


@pytest.fixture
def registry(settings, fake_strategy) -> OAuthProviderRegistry:
    registry = OAuthProviderRegistry()
    registry.register(
        fake_strategy,
        OAuthConfig(
            client_id="fake-client",
            client_secret="fake-secret",
            redirect_uri=settings.callback_url("fake"),
            scopes=fake_strategy.default_scopes,
        ),
    )
    return registry


@pytest.fixture
def app(settings, registry):
    return create_app(settings, registry)


@pytest_asyncio.fixture
async def api_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
