"""
Application configuration and environment variables
"""
import os
from dotenv import load_dotenv

from habitclub.core.constants import STREAK_POLICY_CALENDAR_DAY

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables"""

    # Database / identity provider
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

    # Seconds before a single store call is abandoned
    STORE_TIMEOUT_SECONDS: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

    # Calendar-day math runs in this zone
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "America/Los_Angeles")

    # 'calendar_day' (every habit uses yesterday/today) or 'frequency'
    # (weekly habits continue their streak week over week)
    STREAK_POLICY: str = os.getenv("STREAK_POLICY", STREAK_POLICY_CALENDAR_DAY)

    # strftime pattern for feed entry times
    FEED_TIME_FORMAT: str = os.getenv("FEED_TIME_FORMAT", "%I:%M:%S %p")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Create a global settings instance
settings = Settings()
