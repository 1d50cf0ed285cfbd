"""Application configuration for the GST invoicing backend."""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="INVOICING_", env_file=".env", extra="ignore")

    app_name: str = "GST Invoicing"
    api_version: str = "1.0.0"
    environment: str = "development"

    # Database
    database_url: str = "sqlite:///./gst_invoicing.db"
    storage_timeout_seconds: float = 5.0

    # Invoice numbering
    invoice_number_prefix: str = "INV"
    invoice_number_max_attempts: int = 5

    # Billing defaults
    default_due_days: int = 30
    currency_code: str = "INR"
    currency_symbol: str = "₹"
    reconciliation_tolerance: Decimal = Decimal("0.01")
    default_issuer_id: Optional[int] = None

    # Issuer seeded for local development
    dev_issuer_name: Optional[str] = None
    dev_issuer_registration_number: Optional[str] = None
    dev_issuer_address: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings used by the HTTP layer."""
    return Settings()
