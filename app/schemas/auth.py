from pydantic import BaseModel


class ProviderResponse(BaseModel):
    slug: str
    display_name: str
    login_url: str
    callback_url: str


class ProviderListResponse(BaseModel):
    providers: list[ProviderResponse]


class CurrentUserResponse(BaseModel):
    provider: str
    uid: str
    name: str | None = None
    nickname: str | None = None
    email: str | None = None
    image: str | None = None
    profile_url: str | None = None
