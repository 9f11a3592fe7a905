"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("consultations.config")


class Settings(BaseSettings):
    # Stripe
    stripe_secret_key: str = ""
    checkout_success_url: str = "https://propertreecare.com/success.html"
    checkout_cancel_url: str = "https://propertreecare.com/consultation.html"
    checkout_currency: str = "usd"

    # Azure Blob Storage
    azure_storage_connection_string: str = ""
    azure_storage_container: str = "photos"

    # Microsoft Graph (client-credentials app registration)
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    graph_mailbox: str = "support@propertreecare.com"

    # Business copy used in emails and checkout line items
    business_name: str = "Proper Tree Care"

    # CORS
    cors_origins: str = "*"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def graph_configured(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)

    @property
    def storage_configured(self) -> bool:
        return bool(self.azure_storage_connection_string)

    @property
    def payments_configured(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings for disabled adapters."""
        warnings: list[str] = []

        if not self.graph_configured:
            warnings.append(
                "TENANT_ID, CLIENT_ID or CLIENT_SECRET not set. "
                "Calendar and confirmation email are disabled."
            )

        if not self.storage_configured:
            warnings.append(
                "AZURE_STORAGE_CONNECTION_STRING not set. Photo uploads return 503."
            )

        if not self.payments_configured:
            warnings.append(
                "STRIPE_SECRET_KEY not set. Checkout sessions will fail."
            )

        return warnings


settings = Settings()
