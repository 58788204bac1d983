"""
In-memory availability cache with per-participant last-update tracking
"""
import logging
import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from src.scheduler.models import TimeInterval

logger = logging.getLogger(__name__)


class InMemoryAvailabilityCache:
    """
    Stores the last fetched free intervals for each participant.

    One entry per participant: storing a new window replaces the previous
    one. Reads only succeed when the stored window covers the requested one.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[TimeInterval, Tuple[TimeInterval, ...]]] = {}
        self._last_update: Dict[str, datetime] = {}

    def get_last_update_time(self, participant_id: str) -> Optional[datetime]:
        with self._lock:
            return self._last_update.get(participant_id)

    def get_cached(self, participant_id: str, start_date: datetime,
                   end_date: datetime) -> List[TimeInterval]:
        """Cached free intervals clipped to the window, or [] if the window is not covered"""
        requested = TimeInterval(start_date, end_date)

        with self._lock:
            entry = self._entries.get(participant_id)

        if entry is None:
            return []

        stored_window, intervals = entry
        if not stored_window.contains(requested):
            logger.debug(f"Cached window for {participant_id} does not cover {start_date} - {end_date}")
            return []

        clipped = (interval.clip(requested) for interval in intervals)
        return [interval for interval in clipped if interval is not None]

    def store(self, participant_id: str, intervals: List[TimeInterval],
              start_date: datetime, end_date: datetime) -> bool:
        window = TimeInterval(start_date, end_date)

        with self._lock:
            self._entries[participant_id] = (window, tuple(intervals))
            self._last_update[participant_id] = self._clock()

        logger.debug(f"Cached {len(intervals)} free intervals for {participant_id}")
        return True

    def clear(self):
        logger.info("Clearing availability cache")
        with self._lock:
            self._entries.clear()
            self._last_update.clear()

    def clear_participant(self, participant_id: str):
        logger.info(f"Clearing cached availability for participant: {participant_id}")
        with self._lock:
            self._entries.pop(participant_id, None)
            self._last_update.pop(participant_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
