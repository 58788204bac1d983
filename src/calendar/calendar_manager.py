"""
Google Calendar availability provider for the Smart Calendar slot finder
"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List

import pytz
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import Config
from src.calendar.interfaces import CalendarProviderError
from src.scheduler.models import TimeInterval

logger = logging.getLogger(__name__)


def parse_google_datetime(value: str, tz) -> datetime:
    """Parse an RFC 3339 timestamp from the Calendar API into the configured zone"""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = pytz.utc.localize(parsed)
    return parsed.astimezone(tz)


def free_intervals_from_busy(busy: Iterable[TimeInterval], window: TimeInterval) -> List[TimeInterval]:
    """Invert busy blocks into the free intervals left inside the window"""
    free = []
    cursor = window.start

    for block in sorted(busy):
        clipped = block.clip(window)
        if clipped is None:
            continue
        if clipped.start > cursor:
            free.append(TimeInterval(cursor, clipped.start))
        cursor = max(cursor, clipped.end)

    if cursor < window.end:
        free.append(TimeInterval(cursor, window.end))

    return free


class GoogleCalendarProvider:
    """Fetches free intervals from each participant's primary Google Calendar"""

    def __init__(self, config: Config = None):
        self.config = config or Config()
        self.timezone = pytz.timezone(self.config.TIMEZONE_NAME)

    def _get_credentials(self, email: str) -> Credentials:
        """Get Google Calendar credentials for a user"""
        try:
            token_path = self.config.get_token_path(email)
            return Credentials.from_authorized_user_file(token_path)
        except (ValueError, FileNotFoundError) as e:
            raise CalendarProviderError(f"Calendar token not available for {email}: {e}") from e

    def _build_calendar_service(self, email: str):
        """Build Google Calendar service for a user"""
        credentials = self._get_credentials(email)
        return build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def _query_busy(self, email: str, window: TimeInterval) -> List[Dict[str, str]]:
        calendar_service = self._build_calendar_service(email)
        body = {
            "timeMin": window.start.isoformat(),
            "timeMax": window.end.isoformat(),
            "timeZone": self.config.TIMEZONE_NAME,
            "items": [{"id": self.config.CALENDAR_ID}],
        }
        result = calendar_service.freebusy().query(body=body).execute()

        calendar = result.get("calendars", {}).get(self.config.CALENDAR_ID, {})
        if calendar.get("errors"):
            reasons = ", ".join(error.get("reason", "unknown") for error in calendar["errors"])
            raise CalendarProviderError(f"Free/busy lookup failed for {email}: {reasons}")

        return calendar.get("busy", [])

    def _localize(self, moment: datetime) -> datetime:
        """Express a window bound in the calendar zone so busy and free times share one clock"""
        if moment.tzinfo is None:
            return self.timezone.localize(moment)
        return moment.astimezone(self.timezone)

    def fetch_free_intervals(self, participant_id: str, start_date: datetime,
                             end_date: datetime) -> List[TimeInterval]:
        """Free intervals for one participant, clipped to [start_date, end_date]"""
        logger.info(f"📅 Fetching free/busy for member: {participant_id}")
        window = TimeInterval(self._localize(start_date), self._localize(end_date))

        try:
            busy_periods = self._query_busy(participant_id, window)
        except HttpError as e:
            raise CalendarProviderError(f"HTTP error getting free/busy for {participant_id}: {e}") from e

        busy = []
        for period in busy_periods:
            if not period.get("start") or not period.get("end"):
                continue
            start = parse_google_datetime(period["start"], self.timezone)
            end = parse_google_datetime(period["end"], self.timezone)
            if start < end:
                busy.append(TimeInterval(start, end))
        free = free_intervals_from_busy(busy, window)

        if start_date.tzinfo is None:
            # Callers working in naive local time get naive intervals back
            free = [TimeInterval(interval.start.replace(tzinfo=None), interval.end.replace(tzinfo=None))
                    for interval in free]

        logger.info(f"   {participant_id}: {len(busy)} busy blocks, {len(free)} free intervals")
        return free
