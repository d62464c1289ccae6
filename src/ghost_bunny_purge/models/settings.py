from __future__ import annotations

import dotenv
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghost_bunny_purge.errors import ConfigurationError

REQUIRED_SETTINGS = (
    "ghost_webhook_secret",
    "bunny_pullzone_id",
    "bunny_api_key",
    "bunny_storage_zone_hostname",
    "bunny_storage_zone_name",
    "bunny_storage_zone_password",
    "manual_trigger_token",
)


class EnvSettings(BaseSettings):
    """Process-wide relay configuration, read once at startup."""

    # ghost
    ghost_webhook_secret: str = Field(min_length=1)

    # bunny control api
    bunny_pullzone_id: str = Field(min_length=1)
    bunny_api_key: str = Field(min_length=1)
    bunny_api_base: str = "https://api.bunny.net"

    # bunny storage api
    bunny_storage_zone_hostname: str = Field(min_length=1)
    bunny_storage_zone_name: str = Field(min_length=1)
    bunny_storage_zone_password: str = Field(min_length=1)

    # operator bypass for scheduled / manual purges
    manual_trigger_token: str = Field(min_length=1)

    # relay runtime
    purge_relay_host: str = "0.0.0.0"
    purge_relay_port: int = Field(default=8080, ge=1, le=65535)
    purge_relay_max_concurrent_deletes: int = Field(default=32, ge=0)
    purge_relay_http_timeout: float = Field(default=30.0, gt=0)

    # debug
    purge_relay_verbose: bool = False

    model_config = SettingsConfigDict(
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    @property
    def max_concurrent_deletes(self) -> int | None:
        """Delete fan-out cap, None when unbounded."""
        return self.purge_relay_max_concurrent_deletes or None


def load_settings(**overrides) -> EnvSettings:
    """
    Build and validate settings from the environment and the nearest .env file.
    Raises ConfigurationError naming every missing or invalid variable.
    """
    overrides.setdefault("_env_file", dotenv.find_dotenv(usecwd=True) or None)
    try:
        return EnvSettings(**overrides)
    except ValidationError as e:
        names = sorted({str(err["loc"][0]).upper() for err in e.errors() if err["loc"]})
        missing = [n for n in names if n.lower() in REQUIRED_SETTINGS]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variable: {', '.join(missing)}"
            ) from e
        raise ConfigurationError(f"Invalid configuration: {', '.join(names)}") from e
