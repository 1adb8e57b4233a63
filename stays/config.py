"""Application configuration via environment variables."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger("stays.config")

EmptyAvailabilityPolicy = Literal["unavailable", "unrestricted"]


class Settings(BaseSettings):
    # Pricing
    currency: str = "INR"

    # What an empty list of availability windows means:
    #   "unavailable"  -> no declared availability, nothing can be booked
    #   "unrestricted" -> the property is open on any date not blocked
    empty_availability_policy: EmptyAvailabilityPolicy = "unavailable"

    # Admin auth
    admin_api_key: str = ""

    # Email delivery (confirmation emails). Empty URL -> log only.
    email_api_url: str = ""
    email_api_key: str = ""
    email_from: str = "bookings@example.com"

    # Optional JSON file of properties loaded into the in-memory store
    data_file: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="STAYS_", env_file=".env", env_file_encoding="utf-8"
    )

    @property
    def unrestricted_when_empty(self) -> bool:
        return self.empty_availability_policy == "unrestricted"

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ValueError(
                f"STAYS_CURRENCY must be a 3-letter ISO code, got {self.currency!r}."
            )

        # Admin API key: warn if unset
        if not self.admin_api_key:
            if self.debug:
                warnings.append(
                    "STAYS_ADMIN_API_KEY not set. Admin APIs are open (DEBUG=true)."
                )
            else:
                warnings.append(
                    "STAYS_ADMIN_API_KEY not set. Admin APIs are locked in production. "
                    "Set STAYS_ADMIN_API_KEY in .env to enable admin access."
                )

        if not self.email_api_url:
            warnings.append(
                "STAYS_EMAIL_API_URL not set; confirmation emails are only logged."
            )
        elif not self.email_api_key:
            warnings.append("STAYS_EMAIL_API_KEY not set; the email API may reject requests.")

        return warnings


settings = Settings()
