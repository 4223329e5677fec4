from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_path: str = Field(default="./data/reach.db", description="SQLite database path")

    # Security
    signing_secret: str = Field(
        default="default-secret-change-in-production",
        description="HMAC secret used to sign handover documents",
    )

    # Payout
    platform_fee_percent: float = Field(default=5.0, description="Reach margin taken from each sale (%)")

    # Social analytics
    analytics_api_url: str = Field(
        default="https://api.sociavault.com/v1/scrape",
        description="Social analytics API base URL",
    )
    analytics_api_key: str = Field(default="", description="Social analytics API key")
    analytics_timeout: float = Field(default=30.0, description="Analytics request timeout in seconds")

    # SMS (Termii)
    termii_api_key: str = Field(default="", description="Termii API key for SMS notifications")
    termii_sender_id: str = Field(default="ReachApp", description="Termii sender ID")
    termii_base_url: str = Field(default="https://v3.api.termii.com", description="Termii API host")

    # Tier recompute schedule
    tier_recompute_day: int = Field(default=1, description="Day of month to recompute creator tiers")
    tier_recompute_hour: int = Field(default=2, description="Hour (UTC) to recompute creator tiers")

    # Withdrawal limits (naira)
    withdrawal_min_amount: float = Field(default=1000.0, description="Minimum withdrawal")
    withdrawal_max_per_transaction: float = Field(default=5000000.0, description="Max per withdrawal")
    withdrawal_max_daily: float = Field(default=10000000.0, description="Max withdrawn per day")
    withdrawal_max_monthly: float = Field(default=50000000.0, description="Max withdrawn per month (0 = no limit)")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields in .env
    )

    @property
    def db_path(self) -> Path:
        """Return database path as Path object."""
        return Path(self.database_path)


# Global settings instance
settings = Settings()
