"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentitySettings(BaseModel):
    """Identity Toolkit (Firebase Authentication) REST configuration."""

    # Web API key of the Firebase project
    api_key: str = "CHANGE_ME_IN_PRODUCTION"

    base_url: str = "https://identitytoolkit.googleapis.com/v1"

    # Sent as requestUri/continueUri; must be an authorized domain of the project
    request_uri: str = "http://localhost"

    timeout_seconds: float = 30.0


class AppleSettings(BaseModel):
    """Sign in with Apple configuration.

    Both values come from the Services ID registered at
    https://developer.apple.com/account/resources/identifiers/list/serviceId
    """

    # Services ID, usually reverse domain notation (com.example.app.service)
    client_id: str | None = None

    # Must include a domain name; IP addresses and localhost are rejected by Apple
    redirect_uri: str | None = None


class AuthSettings(BaseModel):
    """Session cookie configuration."""

    jwt_secret: str = "CHANGE_ME_IN_PRODUCTION"  # Must be overridden in production
    jwt_algorithm: str = "HS256"
    session_expiry_days: int = 30
    cookie_name: str = "session_token"


class SessionSettings(BaseModel):
    """In-memory session registry configuration."""

    # Sessions untouched for longer than this are evicted on next access
    idle_timeout_minutes: int = 60


class APISettings(BaseModel):
    """API configuration."""

    host: str
    port: int
    protocol: Literal["http", "https"]

    @computed_field
    @property
    def base_url(self) -> str:
        """Base URL for this API server.

        In development: http://localhost:8000
        In production: https://<host>
        """
        if self.host == "localhost":
            return f"{self.protocol}://{self.host}:{self.port}"
        else:
            return f"{self.protocol}://{self.host}"


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # If None: sends when a token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Override with environment variables, using ``__`` for nested sections:

        IDENTITY__API_KEY=AIza...
        APPLE__CLIENT_ID=com.example.app.service
        AUTH__JWT_SECRET=...
        ENVIRONMENT=production
        HOST=auth.example.com
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    host: str = "localhost"
    port: int = 8000

    # Browser origins allowed to call the API with the session cookie
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    identity: IdentitySettings = IdentitySettings()
    apple: AppleSettings = AppleSettings()
    auth: AuthSettings = AuthSettings()
    sessions: SessionSettings = SessionSettings()
    api: APISettings = APISettings(
        host="localhost", port=8000, protocol="http"
    )  # Overwritten in validator
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def initialize_api_settings(self) -> "Settings":
        """Initialize API settings from host and environment."""
        protocol: Literal["http", "https"] = (
            "http" if self.environment in ("test", "development") else "https"
        )

        self.api = APISettings(host=self.host, port=self.port, protocol=protocol)

        return self

    @property
    def secure_cookies(self) -> bool:
        """Whether the session cookie requires HTTPS."""
        return self.api.protocol == "https"
