"""
Collaborator interfaces consumed by the availability accessor
"""
from datetime import datetime
from typing import List, Optional, Protocol

from src.scheduler.models import TimeInterval


class CalendarProviderError(Exception):
    """A calendar provider could not return availability for a participant"""


class CalendarProvider(Protocol):
    def fetch_free_intervals(self, participant_id: str, start_date: datetime,
                             end_date: datetime) -> List[TimeInterval]:
        """Free intervals clipped to [start_date, end_date]; raises on failure"""
        ...


class AvailabilityCache(Protocol):
    def get_last_update_time(self, participant_id: str) -> Optional[datetime]:
        ...

    def get_cached(self, participant_id: str, start_date: datetime,
                   end_date: datetime) -> List[TimeInterval]:
        ...

    def store(self, participant_id: str, intervals: List[TimeInterval],
              start_date: datetime, end_date: datetime) -> bool:
        ...
