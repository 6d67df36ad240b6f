from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY_BASE = (
    "vestibule-example-development-secret-key-base-do-not-use-in-production"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Vestibule Example"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    host: str = "localhost"
    port: int = 8000
    secret_key_base: str = DEFAULT_SECRET_KEY_BASE

    github_client_id: str | None = None
    github_client_secret: str | None = None

    microsoft_client_id: str | None = None
    microsoft_client_secret: str | None = None
    microsoft_tenant: str = "common"

    session_ttl_seconds: int = 3600
    oauth_state_ttl_seconds: int = 600
    http_timeout_seconds: float = 10.0

    @field_validator(
        "github_client_id",
        "github_client_secret",
        "microsoft_client_id",
        "microsoft_client_secret",
        mode="before",
    )
    @classmethod
    def _blank_as_missing(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"

    def callback_url(self, provider_slug: str) -> str:
        return f"{self.base_url}/auth/{provider_slug}/callback"

    @property
    def uses_default_secret_key_base(self) -> bool:
        return self.secret_key_base == DEFAULT_SECRET_KEY_BASE


settings = Settings()
