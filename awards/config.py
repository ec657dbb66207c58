"""Configuration for the award search tool server.

Settings come from ``SEATS_AERO_*`` environment variables, or from a
``.env`` file in the working directory. Only the API key is required.
"""

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from awards.errors import ConfigError

DEFAULT_BASE_URL = "https://seats.aero/partnerapi"
API_KEY_URL = "https://seats.aero/apikey"


class Settings(BaseSettings):
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0  # seconds per request
    max_retries: int = 3
    # Re-issues allowed per rate-limited request; 1 = single retry
    rate_limit_retries: int = 1

    model_config = SettingsConfigDict(
        env_prefix="SEATS_AERO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def retries_within_limit(self) -> "Settings":
        if self.rate_limit_retries < 0:
            raise ValueError("rate_limit_retries must not be negative")
        if self.rate_limit_retries > self.max_retries:
            raise ValueError(
                f"rate_limit_retries ({self.rate_limit_retries}) exceeds "
                f"max_retries ({self.max_retries})"
            )
        return self


def load_settings(**overrides) -> Settings:
    """Load settings and check that a credential is present.

    Raises:
        ConfigError: If the API key is missing or a setting is invalid.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        lines = ["Invalid configuration:"]
        for err in exc.errors():
            loc = " -> ".join(str(x) for x in err["loc"]) or "settings"
            lines.append(f"  {loc}: {err['msg']}")
        raise ConfigError("\n".join(lines)) from exc

    if not settings.api_key.strip():
        raise ConfigError(
            "SEATS_AERO_API_KEY environment variable is not set.\n"
            "Set it in your environment or in a .env file.\n"
            f"Get your API key from: {API_KEY_URL}"
        )
    return settings
