"""
Shared fixtures for the slot finder test suite
"""
from datetime import datetime, timedelta

import pytest

from src.calendar.availability_accessor import AvailabilityAccessor
from src.calendar.availability_cache import InMemoryAvailabilityCache
from src.calendar.mock_calendar_manager import MockCalendarProvider
from src.scheduler.models import ParticipantAvailability, SchedulingRequirements, TimeInterval
from src.scheduler.smart_scheduler import SmartScheduler

# Week of 21 July 2025: Monday 21st through Sunday 27th
MONDAY = datetime(2025, 7, 21)
TUESDAY = datetime(2025, 7, 22)
WEDNESDAY = datetime(2025, 7, 23)
THURSDAY = datetime(2025, 7, 24)
FRIDAY = datetime(2025, 7, 25)
SATURDAY = datetime(2025, 7, 26)


def at(day: datetime, hour: int, minute: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute)


def interval(day: datetime, start: str, end: str) -> TimeInterval:
    """TimeInterval on a day from 'HH:MM' strings"""
    start_hour, start_minute = map(int, start.split(":"))
    end_hour, end_minute = map(int, end.split(":"))
    return TimeInterval(at(day, start_hour, start_minute), at(day, end_hour, end_minute))


def availability(**free) -> ParticipantAvailability:
    return ParticipantAvailability(free)


@pytest.fixture
def requirements_60():
    return SchedulingRequirements(duration_minutes=60, max_results=100)


@pytest.fixture
def tuesday_window():
    return TimeInterval(TUESDAY, TUESDAY + timedelta(days=1))


@pytest.fixture
def cache():
    return InMemoryAvailabilityCache()


@pytest.fixture
def make_scheduler(cache):
    """Build a SmartScheduler over a mock provider table"""

    def _make(free_intervals=None, failing=()):
        provider = MockCalendarProvider(free_intervals=free_intervals, failing=failing)
        accessor = AvailabilityAccessor(provider=provider, cache=cache, fetch_timeout=5)
        return SmartScheduler(accessor=accessor)

    return _make
