from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OAuthTokens(BaseModel):
    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int | None = None
    scope: str | None = None
    id_token: str | None = None


class OAuthUserInfo(BaseModel):
    provider: str
    uid: str
    name: str | None = None
    nickname: str | None = None
    email: str | None = None
    image: str | None = None
    profile_url: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


class OAuthConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: tuple[str, ...] = ()
