from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Development
    DEV_MODE: bool = Field(default=True, description="Enable debug mode")

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./parkpass.db", description="Database connection URL")
    ASYNC_DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./parkpass.db", description="Async database URL")

    # FastAPI
    FASTAPI_HOST: str = Field(default="localhost", description="FastAPI host")
    FASTAPI_PORT: int = Field(default=8080, description="FastAPI port")

    # Frontend links (QR codes, confirmation emails)
    FRONTEND_BASE_URL: str = Field(default="http://localhost:3000", description="Customer-facing site URL")

    # Booking
    LOT_TIMEZONE: str = Field(default="America/New_York", description="Timezone recurring schedules are expressed in")
    CURRENCY: str = Field(default="usd", description="Currency charged by the payment provider")
    DEFAULT_PASS_HOURS: int = Field(default=1, description="Pass length when an order has no price tier")
    ORDERS_PAGE_SIZE: int = Field(default=20, description="Bookings per dashboard page")
    LOT_SEARCH_LIMIT: int = Field(default=10, description="Maximum lots returned by a search")

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = Field(default=None, description="Stripe secret API key")
    STRIPE_API_VERSION: str = Field(default="2025-05-28.basil", description="Pinned Stripe API version")

    # SendGrid
    SENDGRID_API_KEY: Optional[str] = Field(default=None, description="SendGrid API key")
    SENDGRID_SENDER_EMAIL: Optional[str] = Field(default=None, description="Verified sender address")


# Create settings instance
settings = Settings()
