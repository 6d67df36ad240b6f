from urllib.parse import parse_qs, urlsplit

import jwt
import pytest

from app.oauth.http import OAuthHttpError
from app.oauth.providers import GitHubStrategy, MicrosoftStrategy
from app.oauth.providers.github import primary_verified_email
from app.oauth.providers.microsoft import id_token_claims, user_info_from_profile
from app.oauth.types import OAuthConfig, OAuthTokens


class StubHttp:
    def __init__(self, get=None, post=None):
        self._get = dict(get or {})
        self._post = post
        self.requests: list[tuple[str, str, dict]] = []

    async def get_json(self, url, headers=None):
        self.requests.append(("GET", url, headers or {}))
        response = self._get[url]
        if isinstance(response, Exception):
            raise response
        return response

    async def post_form(self, url, data, headers=None):
        self.requests.append(("POST", url, data))
        if isinstance(self._post, Exception):
            raise self._post
        return self._post


def _config(scopes):
    return OAuthConfig(
        client_id="client",
        client_secret="secret",
        redirect_uri="http://localhost:8000/auth/x/callback",
        scopes=scopes,
    )


def _query(url: str) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}


def test_github_authorization_url():
    strategy = GitHubStrategy()

    url = strategy.build_authorization_url(
        _config(strategy.default_scopes), "the-state", "the-challenge"
    )

    assert url.startswith("https://github.com/login/oauth/authorize?")
    params = _query(url)
    assert params["client_id"] == "client"
    assert params["redirect_uri"] == "http://localhost:8000/auth/x/callback"
    assert params["scope"] == "user:email"
    assert params["state"] == "the-state"
    assert params["code_challenge"] == "the-challenge"
    assert params["code_challenge_method"] == "S256"


def test_microsoft_authorization_url_uses_tenant():
    strategy = MicrosoftStrategy(tenant="organizations")

    url = strategy.build_authorization_url(
        _config(strategy.default_scopes), "s", "c"
    )

    assert url.startswith(
        "https://login.microsoftonline.com/organizations/oauth2/v2.0/authorize?"
    )
    params = _query(url)
    assert params["response_type"] == "code"
    assert params["scope"] == "openid profile email User.Read"


def test_primary_verified_email():
    emails = [
        {"email": "old@example.com", "primary": False, "verified": True},
        {"email": "main@example.com", "primary": True, "verified": True},
    ]

    assert primary_verified_email(emails) == "main@example.com"
    assert primary_verified_email([{"email": "x", "primary": True, "verified": False}]) is None


async def test_github_token_error_payload_is_failure():
    http = StubHttp(post={"error": "bad_verification_code"})

    tokens = await GitHubStrategy().exchange_code(
        http, _config(("user:email",)), "code", "verifier"
    )

    assert tokens is None
    _, url, data = http.requests[0]
    assert url == "https://github.com/login/oauth/access_token"
    assert data["code_verifier"] == "verifier"


async def test_github_token_exchange():
    http = StubHttp(post={"access_token": "gho_x", "token_type": "bearer", "scope": "user:email"})

    tokens = await GitHubStrategy().exchange_code(
        http, _config(("user:email",)), "code", "verifier"
    )

    assert tokens.access_token == "gho_x"
    assert tokens.scope == "user:email"


async def test_github_user_with_private_email():
    http = StubHttp(
        get={
            "https://api.github.com/user": {
                "id": 1,
                "login": "octocat",
                "name": None,
                "email": None,
                "avatar_url": "https://avatars.example/1",
                "html_url": "https://github.com/octocat",
            },
            "https://api.github.com/user/emails": [
                {"email": "octo@example.com", "primary": True, "verified": True}
            ],
        }
    )

    user = await GitHubStrategy().fetch_user_info(
        http, _config(()), OAuthTokens(access_token="gho_x")
    )

    assert user.provider == "github"
    assert user.uid == "1"
    assert user.name == "octocat"
    assert user.email == "octo@example.com"
    assert http.requests[0][2]["Authorization"] == "Bearer gho_x"


async def test_github_user_fetch_failure():
    http = StubHttp(get={"https://api.github.com/user": OAuthHttpError(401, "Bad credentials")})

    user = await GitHubStrategy().fetch_user_info(
        http, _config(()), OAuthTokens(access_token="gho_x")
    )

    assert user is None


async def test_microsoft_token_exchange_failure():
    http = StubHttp(post=OAuthHttpError(400, "invalid_grant"))

    tokens = await MicrosoftStrategy().exchange_code(
        http, _config(("openid",)), "code", "verifier"
    )

    assert tokens is None


async def test_microsoft_token_exchange_sends_grant_type():
    http = StubHttp(post={"access_token": "ms-token", "id_token": "id"})

    tokens = await MicrosoftStrategy(tenant="common").exchange_code(
        http, _config(("openid",)), "code", "verifier"
    )

    assert tokens.access_token == "ms-token"
    _, url, data = http.requests[0]
    assert url == "https://login.microsoftonline.com/common/oauth2/v2.0/token"
    assert data["grant_type"] == "authorization_code"


def test_id_token_claims_without_verification():
    token = jwt.encode({"email": "ms@example.com"}, "a-test-signing-key-that-is-long-enough-for-hs256", algorithm="HS256")

    assert id_token_claims(token) == {"email": "ms@example.com"}
    assert id_token_claims("not-a-jwt") == {}
    assert id_token_claims(None) == {}


@pytest.mark.parametrize(
    ("profile", "claims", "expected"),
    [
        ({"id": "a", "mail": "mail@example.com", "userPrincipalName": "upn@example.com"}, {}, "mail@example.com"),
        ({"id": "a", "mail": None, "userPrincipalName": "upn@example.com"}, {}, "upn@example.com"),
        ({"id": "a"}, {"preferred_username": "claim@example.com"}, "claim@example.com"),
    ],
)
def test_microsoft_email_fallbacks(profile, claims, expected):
    assert user_info_from_profile(profile, claims).email == expected


async def test_microsoft_user_info():
    http = StubHttp(
        get={
            "https://graph.microsoft.com/v1.0/me": {
                "id": "ms-1",
                "displayName": "Grace Hopper",
                "mail": None,
                "userPrincipalName": "grace@contoso.com",
            }
        }
    )

    user = await MicrosoftStrategy().fetch_user_info(
        http, _config(()), OAuthTokens(access_token="ms-token")
    )

    assert user.provider == "microsoft"
    assert user.uid == "ms-1"
    assert user.name == "Grace Hopper"
    assert user.email == "grace@contoso.com"


@pytest.mark.parametrize("body", [None, [], ""])
async def test_github_empty_token_response_is_failure(body):
    http = StubHttp(post=body)

    tokens = await GitHubStrategy().exchange_code(
        http, _config(("user:email",)), "code", "verifier"
    )

    assert tokens is None


async def test_github_user_when_emails_endpoint_forbidden():
    http = StubHttp(
        get={
            "https://api.github.com/user": {"id": 7, "login": "hidden", "email": None},
            "https://api.github.com/user/emails": OAuthHttpError(403, "Resource not accessible"),
        }
    )

    user = await GitHubStrategy().fetch_user_info(
        http, _config(()), OAuthTokens(access_token="gho_x")
    )

    assert user.uid == "7"
    assert user.nickname == "hidden"
    assert user.email is None
