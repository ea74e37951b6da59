
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "PC Build Marketplace API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"
    audit_enabled: bool = Field(default=True, alias="AUDIT_ENABLED")

    # Database (Postgres via asyncpg in production or SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./marketplace_dev.db",
        alias="DATABASE_URL",
    )

    # Multi-tenancy default
    default_client_id: str = Field(default="default", alias="DEFAULT_CLIENT_ID")

    # Order charges (whole rupees)
    gst_rate: float = Field(default=0.18, alias="GST_RATE")
    delivery_rate_per_kg: int = Field(default=200, alias="DELIVERY_RATE_PER_KG")
    delivery_min_charge: int = Field(default=500, alias="DELIVERY_MIN_CHARGE")
    delivery_max_charge: int = Field(default=2000, alias="DELIVERY_MAX_CHARGE")
    estimated_delivery_days: int = Field(default=14, alias="ESTIMATED_DELIVERY_DAYS")

    # Invoice storage (local "bucket" directory served under public_files_url)
    storage_root: str = Field(default="./storage", alias="STORAGE_ROOT")
    invoices_bucket: str = Field(default="invoices", alias="INVOICES_BUCKET")
    public_files_url: str = Field(
        default="http://localhost:8000/api/v1/files", alias="PUBLIC_FILES_URL",
    )

    # Transactional email (Resend)
    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    resend_api_url: str = Field(
        default="https://api.resend.com/emails", alias="RESEND_API_URL",
    )
    email_from: str = Field(
        default="Assemblie <noreply@assemblie.in>", alias="EMAIL_FROM",
    )
    email_timeout: int = Field(default=30, alias="EMAIL_TIMEOUT")
    tracking_page_url: str = Field(
        default="https://assemblie.in/tracking", alias="TRACKING_PAGE_URL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

    @property
    def email_enabled(self) -> bool:
        """Outbound mail is sent only when a Resend key is configured."""
        return bool(self.resend_api_key)

settings = Settings()
