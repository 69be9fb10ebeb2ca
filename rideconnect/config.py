"""Application configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Geocoding / routing providers
    locationiq_api_key: str = ""
    openroute_api_key: str = ""
    http_timeout_seconds: float = 10.0

    # Pricing
    standard_hourly_rate: float = 60.0
    standard_minimum_fare: float = 16.0
    airport_hourly_rate: float = 80.0
    airport_minimum_fare: float = 30.0
    per_passenger_rate: float = 5.0
    base_fare: float = 0.0

    # Business hours (slot generation)
    business_timezone: str = "America/Los_Angeles"
    slot_start_hour: int = 15
    slot_end_hour: int = 23
    slot_interval_minutes: int = 15

    # Admin auth
    admin_api_key: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        if not 0 <= self.slot_start_hour < self.slot_end_hour <= 24:
            raise ValueError(
                f"Invalid business hours: SLOT_START_HOUR={self.slot_start_hour}, "
                f"SLOT_END_HOUR={self.slot_end_hour}."
            )
        if self.slot_interval_minutes <= 0 or 60 % self.slot_interval_minutes:
            raise ValueError(
                "SLOT_INTERVAL_MINUTES must be a positive divisor of 60."
            )

        if not self.locationiq_api_key:
            warnings.append(
                "LOCATIONIQ_API_KEY not set. Addresses resolve via the landmark table."
            )
        if not self.openroute_api_key:
            warnings.append(
                "OPENROUTE_API_KEY not set. Routes are estimated from straight-line distance."
            )

        if not self.admin_api_key:
            if self.debug:
                warnings.append(
                    "ADMIN_API_KEY not set. Admin APIs are open (DEBUG=true)."
                )
            else:
                warnings.append(
                    "ADMIN_API_KEY not set. Admin APIs are locked in production. "
                    "Set ADMIN_API_KEY in .env to enable admin access."
                )

        return warnings


settings = Settings()
