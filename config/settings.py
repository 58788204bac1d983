"""
Configuration settings for the Smart Calendar slot finder
"""
import os
from datetime import time, timedelta
from typing import List


def _env(name: str, default):
    """Read an override from SMART_CALENDAR_<NAME>, cast to the default's type"""
    raw = os.getenv(f"SMART_CALENDAR_{name}")
    if raw is None:
        return default
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return type(default)(raw)


class Config:
    # Calendar Configuration
    CALENDAR_TOKENS_PATH = _env("TOKENS_PATH", "/home/user/smart-calendar/Google_Calendar_Keys")
    TIMEZONE_NAME = _env("TIMEZONE", "Asia/Kolkata")
    CALENDAR_ID = "primary"

    # Users with calendar tokens (empty list means any user with a token file)
    AVAILABLE_USERS: List[str] = [
        user.strip() for user in _env("AVAILABLE_USERS", "").split(",") if user.strip()
    ]

    # Mock calendar for local runs without Google credentials
    USE_MOCK_CALENDAR = _env("USE_MOCK_CALENDAR", False)
    MOCK_CALENDAR_SEED = _env("MOCK_CALENDAR_SEED", 42)
    MOCK_CALENDAR_BUSYNESS = _env("MOCK_CALENDAR_BUSYNESS", 0.4)

    # API Configuration
    API_HOST = _env("API_HOST", "0.0.0.0")
    API_PORT = _env("API_PORT", 5000)
    API_TIMEOUT = 10  # seconds

    # Scheduling Configuration
    BUSINESS_HOURS_START = _env("BUSINESS_HOURS_START", 9)   # 9 AM
    BUSINESS_HOURS_END = _env("BUSINESS_HOURS_END", 17)      # 5 PM
    PREFERRED_MEETING_HOUR = _env("PREFERRED_MEETING_HOUR", 10)
    MAX_MEETING_DURATION = 480  # 8 hours
    DEFAULT_MEETING_DURATION = 30  # minutes
    DEFAULT_MAX_RESULTS = 5
    MAX_SEARCH_DAYS = 31

    # Availability fetching
    CACHE_FRESHNESS = timedelta(hours=1)
    CALENDAR_FETCH_TIMEOUT = _env("FETCH_TIMEOUT", 30.0)  # seconds, per request
    MAX_FETCH_WORKERS = 5

    # Date/Time Formats
    CONFLICT_TIME_FORMAT = "%H:%M"

    @classmethod
    def working_hours(cls) -> tuple:
        """Working-hours window as (start, end) times of day"""
        return time(cls.BUSINESS_HOURS_START), time(cls.BUSINESS_HOURS_END)

    @classmethod
    def preferred_time_of_day(cls) -> time:
        return time(cls.PREFERRED_MEETING_HOUR)

    @classmethod
    def get_token_path(cls, email: str) -> str:
        """Get token file path for a user email"""
        if cls.AVAILABLE_USERS and email not in cls.AVAILABLE_USERS:
            raise ValueError(f"User {email} does not have a calendar token. Available users: {cls.AVAILABLE_USERS}")

        username = email.split("@")[0]
        token_file = f"{username}.token"
        token_path = os.path.join(cls.CALENDAR_TOKENS_PATH, token_file)

        if not os.path.exists(token_path):
            raise FileNotFoundError(f"Token file not found: {token_path}")

        return token_path
