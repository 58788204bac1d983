"""
Mock calendar provider for running without Google Calendar credentials
"""
import logging
import random
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List

from config.settings import Config
from src.calendar.calendar_manager import free_intervals_from_busy
from src.calendar.interfaces import CalendarProviderError
from src.scheduler.models import TimeInterval

logger = logging.getLogger(__name__)


def _local_datetime(day: date, hour: int, tzinfo) -> datetime:
    """Wall-clock hour on a day, with the UTC offset that applies on that day"""
    moment = datetime.combine(day, time(hour))
    if tzinfo is None:
        return moment
    if hasattr(tzinfo, "localize"):
        return tzinfo.localize(moment)
    return moment.replace(tzinfo=tzinfo)


class MockCalendarProvider:
    """
    Serves free intervals from a fixed table or from generated schedules.

    Participants present in ``free_intervals`` get exactly those intervals.
    Everyone else gets a generated working-day schedule whose meetings are
    derived from the seed, the participant and the date, so repeated calls
    return identical data. Participants in ``failing`` always raise.
    """

    def __init__(self, free_intervals: Dict[str, List[TimeInterval]] = None,
                 failing: Iterable[str] = (), seed: int = None, busyness: float = None):
        self.free_intervals = dict(free_intervals or {})
        self.failing = set(failing)
        self.seed = Config.MOCK_CALENDAR_SEED if seed is None else seed
        # Clamp between 10% and 90% busy
        busyness = Config.MOCK_CALENDAR_BUSYNESS if busyness is None else busyness
        self.busyness = max(0.1, min(0.9, busyness))
        self.calls: List[str] = []

    def fetch_free_intervals(self, participant_id: str, start_date: datetime,
                             end_date: datetime) -> List[TimeInterval]:
        logger.info(f"📋 MOCK: Getting free intervals for {participant_id}")
        self.calls.append(participant_id)

        if participant_id in self.failing:
            raise CalendarProviderError(f"Mock calendar unavailable for {participant_id}")

        window = TimeInterval(start_date, end_date)
        if participant_id in self.free_intervals:
            clipped = (interval.clip(window) for interval in self.free_intervals[participant_id])
            return [interval for interval in clipped if interval is not None]

        return self._generate_free_intervals(participant_id, window)

    def _generate_free_intervals(self, participant_id: str, window: TimeInterval) -> List[TimeInterval]:
        free = []
        day = window.start.date()

        while day <= window.end.date():
            if day.weekday() < 5:
                working_day = TimeInterval(_local_datetime(day, Config.BUSINESS_HOURS_START, window.start.tzinfo),
                                           _local_datetime(day, Config.BUSINESS_HOURS_END, window.start.tzinfo))
                clipped = working_day.clip(window)
                if clipped is not None:
                    meetings = self._generate_meetings(participant_id, working_day)
                    free.extend(free_intervals_from_busy(meetings, clipped))
            day += timedelta(days=1)

        return free

    def _generate_meetings(self, participant_id: str, working_day: TimeInterval) -> List[TimeInterval]:
        rng = random.Random(f"{self.seed}:{participant_id}:{working_day.start.date().isoformat()}")
        half_hours = int(working_day.duration.total_seconds() // 1800)
        meeting_count = int(round(half_hours * self.busyness / 2))

        meetings = []
        for _ in range(meeting_count):
            offset = rng.randrange(half_hours)
            length = rng.choice((1, 2))
            start = working_day.start + timedelta(minutes=30 * offset)
            end = min(start + timedelta(minutes=30 * length), working_day.end)
            meetings.append(TimeInterval(start, end))

        return meetings
