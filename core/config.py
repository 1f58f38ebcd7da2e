"""Configuration models and loading."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigurationError

DEFAULT_NETWORK_API_URL = "https://network.satnogs.org/api"
DEFAULT_DB_API_URL = "https://db.satnogs.org/api"
DEVELOPMENT_CONTEXT = "dev"


class Config(BaseSettings):
    """Process-wide settings, read once from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
        frozen=True,
    )

    network_api_url: str = Field(
        default=DEFAULT_NETWORK_API_URL,
        validation_alias="SATNOGS_NETWORK_API_URL",
    )
    db_api_url: str = Field(
        default=DEFAULT_DB_API_URL,
        validation_alias="SATNOGS_DB_API_URL",
    )
    allowed_origin_url: str | None = Field(default=None, validation_alias="ALLOWED_ORIGIN_URL")
    context: str = Field(default="production", validation_alias="CONTEXT")
    host: str = Field(default="127.0.0.1", validation_alias="PROXY_HOST")
    port: int = Field(default=8888, ge=1, le=65535, validation_alias="PROXY_PORT")

    @field_validator("network_api_url", "db_api_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"expected an http(s) URL, got {value!r}")
        return value

    @property
    def is_development(self) -> bool:
        return self.context == DEVELOPMENT_CONTEXT

    @property
    def allowed_origin(self) -> str:
        """Origin allowed by CORS; permissive when unset."""
        if self.is_development:
            return "*"
        return self.allowed_origin_url or "*"

    def base_url_for(self, api_type: str) -> str:
        """Return the upstream base URL for a route's API type."""
        if api_type == "network":
            return self.network_api_url
        if api_type == "db":
            return self.db_api_url
        raise ValueError(f"Unknown API type: {api_type}")


def load_config() -> Config:
    """Load configuration from the environment (and .env, when present)."""
    try:
        return Config()
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
