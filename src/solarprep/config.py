"""Configuration management for solarprep.

Loads store connection details and pipeline tunables from environment
variables using Pydantic. Credentials belong in .env (never hardcoded).

Usage:
    from solarprep.config import settings

    print(settings.influx_url)
    print(settings.lookback_days)
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """solarprep configuration from environment variables.

    Loads from .env file automatically. Validates on instantiation.
    Every field has a default so the pipeline can run against a local
    InfluxDB without any configuration.

    Attributes:
        influx_url: Base URL of the InfluxDB 1.x HTTP API
        influx_database: Database holding the Home Assistant state series
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR)
        lookback_days: Default history window for a dataset (days)
        cache_ttl_hours: Lifetime of a prepared dataset in the result cache
        timezone: IANA zone used for calendar features
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    # Time-series store
    influx_url: str = Field(default="http://localhost:8086", description="InfluxDB base URL")
    influx_database: str = Field(default="home_assistant", description="InfluxDB database")
    influx_username: str | None = Field(default=None, description="InfluxDB user")
    influx_password: str | None = Field(default=None, description="InfluxDB password")
    influx_rate_limit: int = Field(default=10, ge=1, description="InfluxDB requests/second")
    influx_timeout: float = Field(default=30.0, gt=0, description="InfluxDB request timeout (s)")

    # Series selection
    solar_topic_pattern: str = Field(default=".*pv_power.*state$")
    load_topic_pattern: str = Field(default=".*load.*state$")
    battery_topic_pattern: str = Field(default=".*battery.*soc.*state$")
    price_measurement: str = Field(default="tibber_prices")

    # System Settings
    log_level: str = Field(default="INFO", description="Logging level")

    # Pipeline tunables
    lookback_days: int = Field(default=365, ge=1, description="Default history window (days)")
    cache_ttl_hours: float = Field(default=6.0, gt=0, description="Result cache TTL (hours)")
    alignment_tolerance_hours: float = Field(
        default=2.0,
        ge=0,
        description="Max distance between a slot and its nearest sample (hours)",
    )
    outlier_threshold: float = Field(
        default=3.0,
        gt=0,
        description="Deviation from the mean, in population std, beyond which a value is replaced",
    )
    smoothing_half_window: int = Field(default=3, ge=1, description="Moving average half window")
    price_multiplier: float = Field(default=100.0, gt=0, description="Store price unit -> cents")
    timezone: str = Field(default="UTC", description="Timezone for calendar features")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return v_upper

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"timezone must be a valid IANA zone, got '{v}'")
        return v

    @field_validator("influx_url")
    @classmethod
    def validate_influx_url(cls, v: str) -> str:
        """Ensure the store URL has a scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"influx_url must start with http:// or https://, got '{v}'")
        return v.rstrip("/")


# Global settings instance, loaded once at import
settings = Settings()
