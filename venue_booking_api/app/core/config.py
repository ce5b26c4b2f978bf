"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration; in a production deployment you
should at least override ``SECRET_KEY`` and the admin credentials.

Payment simulation knobs (delay and success rates) live here as well
so that tests can pin them on the shared ``settings`` instance.
"""

import os
from dataclasses import dataclass


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Venue Booking API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    # Tokens live for a week unless overridden.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "venue_booking.db")

    # Default organizer account created at startup when both values are set.
    admin_email: str = os.getenv("ADMIN_EMAIL", "")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "")
    admin_name: str = os.getenv("ADMIN_NAME", "Administrator")

    # Simulated payment gateway.
    payment_simulation_delay: float = _env_float("PAYMENT_SIMULATION_DELAY", "1.0")
    refund_simulation_delay: float = _env_float("REFUND_SIMULATION_DELAY", "1.5")
    payment_success_rate: float = _env_float("PAYMENT_SUCCESS_RATE", "0.95")
    refund_success_rate: float = _env_float("REFUND_SUCCESS_RATE", "0.90")

    # Shared secret for gateway webhooks.  When empty any non-empty
    # signature in the webhook body is accepted.
    webhook_secret: str = os.getenv("WEBHOOK_SECRET", "")

    tax_rate: float = _env_float("TAX_RATE", "0.08")
    service_fee_rate: float = _env_float("SERVICE_FEE_RATE", "0.05")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()
