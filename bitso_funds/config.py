"""Application configuration."""

from pydantic import Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bitso_funds.services.bitso.signer import BitsoCredentials

DEFAULT_API_ENDPOINT = "https://api.bitso.com"

_HTTP_URL = TypeAdapter(HttpUrl)


class ConfigurationError(Exception):
    """Raised when required settings are missing or invalid."""


class Settings(BaseSettings):
    """Application settings."""

    # Bitso API
    bitso_api_key: str = ""
    bitso_api_secret: str = ""
    bitso_api_endpoint: str = DEFAULT_API_ENDPOINT

    # Client behaviour
    cache_ttl_seconds: int = Field(default=300, gt=0)
    request_timeout_ms: int = Field(default=30000, gt=0)
    default_limit: int = Field(default=100, ge=1, le=100)

    # Application
    log_level: str = "INFO"
    log_file: str | None = None  # Optional debug log, appended to
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("bitso_api_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Reject endpoints that are not absolute http(s) URLs."""
        _HTTP_URL.validate_python(v)
        return v.rstrip("/")

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000

    def credentials(self) -> BitsoCredentials:
        """Return API credentials, failing if either value is missing.

        Raises:
            ConfigurationError: If BITSO_API_KEY or BITSO_API_SECRET is empty
        """
        missing = [
            name
            for name, value in (
                ("BITSO_API_KEY", self.bitso_api_key),
                ("BITSO_API_SECRET", self.bitso_api_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )
        return BitsoCredentials(api_key=self.bitso_api_key, api_secret=self.bitso_api_secret)


def load_settings(**overrides) -> Settings:
    """Load settings from the environment, reporting validation failures.

    Raises:
        ConfigurationError: If a setting cannot be parsed or is out of range
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Configuration validation failed: {details}") from e
