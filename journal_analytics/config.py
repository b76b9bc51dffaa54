"""Application configuration."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Supabase project (PostgREST endpoint + anon key)
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # When set, trades are read from this CSV export instead of Supabase
    trades_csv: Optional[str] = None

    # Reporting calendar
    report_timezone: str = "UTC"
    week_start: str = "sunday"
    default_period: str = "all"

    # Root log level for the server entry point
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
            trades_csv=os.getenv("TRADES_CSV") or None,
            report_timezone=os.getenv("REPORT_TIMEZONE", "UTC"),
            week_start=os.getenv("WEEK_START", "sunday").lower(),
            default_period=os.getenv("DEFAULT_PERIOD", "all").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
