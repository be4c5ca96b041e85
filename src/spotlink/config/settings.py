"""Application settings.

Hey future me - there is NO module-level settings singleton on purpose. Build a Settings
object once at startup and pass it into create_client(); TokenSource and the services
get it from there. Tests just construct their own Settings(...) with kwargs.

Environment variables:
    SPOTLINK_APP__CLIENT_ID, SPOTLINK_APP__PROXY, SPOTLINK_APP__AP_PORT, ...
    SPOTLINK_LOG_LEVEL, SPOTLINK_LOG_JSON, SPOTLINK_HTTP_TIMEOUT, ...
    SPOTIFY_USERNAME / SPOTIFY_PASSWORD  (LoginCredentials, used for re-auth)
"""

import logging

import httpx
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spotlink.domain.ports import Credentials, SessionConfig

logger = logging.getLogger(__name__)

# official Spotify web app's client id
DEFAULT_CLIENT_ID = "65b708073fc0480ea92a077233ca87bd"


class AppConfig(BaseModel):
    """Session/app level options."""

    client_id: str = Field(
        default=DEFAULT_CLIENT_ID, description="Client id used to request tokens"
    )
    client_port: int = Field(default=8080, description="Local OAuth callback port")
    proxy: str | None = Field(default=None, description="Proxy URL for the session")
    ap_port: int | None = Field(default=None, description="Access point port override")

    @field_validator("client_id")
    @classmethod
    def _client_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("client_id must not be empty")
        return value.strip()

    def session_config(self) -> SessionConfig:
        """Build the session handshake options.

        An unparsable proxy is logged and ignored rather than failing startup.
        """
        proxy = None
        if self.proxy:
            try:
                url = httpx.URL(self.proxy)
                if not url.scheme or not url.host:
                    raise ValueError("missing scheme or host")
                proxy = str(url)
            except (httpx.InvalidURL, ValueError) as e:
                logger.warning(f"failed to parse proxy url {self.proxy}: {e}")
        return SessionConfig(proxy=proxy, ap_port=self.ap_port)


class LoginCredentials(BaseSettings):
    """Stored login pair. Falls back to SPOTIFY_USERNAME / SPOTIFY_PASSWORD."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_", env_file=".env", extra="ignore"
    )

    username: str
    password: SecretStr

    def to_credentials(self) -> Credentials:
        return Credentials(
            username=self.username, password=self.password.get_secret_value()
        )


class Settings(BaseSettings):
    """Top-level settings consumed by create_client()."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTLINK_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app: AppConfig = Field(default_factory=AppConfig)
    login: LoginCredentials | None = None

    api_base_url: str = "https://api.spotify.com/v1"
    market: str = "from_token"
    http_timeout: float = 30.0

    # Token bucket pacing for catalog requests (not a retry policy)
    rate_limit_per_second: float = 2.0
    rate_limit_burst: int = 10

    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_pass(cls, username: str, password: str, **kwargs: object) -> "Settings":
        """Settings with default app config and the given login pair."""
        return cls(
            login=LoginCredentials(username=username, password=password),  # type: ignore[arg-type]
            **kwargs,  # type: ignore[arg-type]
        )
