"""
Availability accessor: cache-first retrieval of participants' free intervals
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from config.settings import Config
from src.calendar.interfaces import AvailabilityCache, CalendarProvider
from src.scheduler.models import ParticipantAvailability, TimeInterval

logger = logging.getLogger(__name__)


def normalize_intervals(intervals: List[TimeInterval], window: TimeInterval) -> List[TimeInterval]:
    """Clip intervals to the window and sort them by start"""
    clipped = (interval.clip(window) for interval in intervals)
    return sorted(interval for interval in clipped if interval is not None)


class AvailabilityAccessor:
    """
    Builds a ParticipantAvailability map for a group of participants.

    Each participant is fetched independently and in parallel: fresh cached
    data is preferred, otherwise the live provider is called and the result
    written back to the cache. A participant whose provider call fails or
    times out ends up with no availability instead of failing the request.
    """

    def __init__(self, provider: CalendarProvider, cache: AvailabilityCache,
                 freshness: timedelta = None, fetch_timeout: float = None,
                 max_workers: int = None, clock: Callable[[], datetime] = datetime.now):
        self.provider = provider
        self.cache = cache
        self.freshness = freshness if freshness is not None else Config.CACHE_FRESHNESS
        self.fetch_timeout = fetch_timeout if fetch_timeout is not None else Config.CALENDAR_FETCH_TIMEOUT
        self.max_workers = max_workers or Config.MAX_FETCH_WORKERS
        self._clock = clock

    def get_participant_availability(self, participant_ids: List[str], start_date: datetime,
                                     end_date: datetime) -> ParticipantAvailability:
        """Get free intervals for all participants in parallel"""
        window = TimeInterval(start_date, end_date)
        logger.info(f"🔄 Fetching availability for {len(participant_ids)} participants")
        logger.info(f"   Window: {start_date.isoformat()} to {end_date.isoformat()}")

        results: Dict[str, List[TimeInterval]] = {}
        unchecked: List[str] = []

        executor = ThreadPoolExecutor(max_workers=max(1, min(len(participant_ids), self.max_workers)))
        try:
            futures = {
                participant_id: executor.submit(self._fetch_participant, participant_id, window)
                for participant_id in participant_ids
            }
            deadline = time.monotonic() + self.fetch_timeout

            for participant_id, future in futures.items():
                try:
                    intervals, checked = future.result(timeout=max(0.0, deadline - time.monotonic()))
                except FutureTimeoutError:
                    logger.error(f"Timed out fetching availability for {participant_id} "
                                 f"after {self.fetch_timeout}s")
                    intervals, checked = [], False

                results[participant_id] = intervals
                if not checked:
                    unchecked.append(participant_id)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if unchecked:
            logger.warning(f"⚠️  {len(unchecked)} participants could not be checked: {', '.join(unchecked)}")

        return ParticipantAvailability(results, unchecked_participants=unchecked)

    def _fetch_participant(self, participant_id: str,
                           window: TimeInterval) -> Tuple[List[TimeInterval], bool]:
        cached = self._read_fresh_cache(participant_id, window)
        if cached:
            logger.info(f"Using cached availability for {participant_id}")
            return cached, True

        try:
            fresh = self.provider.fetch_free_intervals(participant_id, window.start, window.end)
            intervals = normalize_intervals(fresh, window)
        except Exception as e:
            logger.error(f"Error getting availability for {participant_id}: {e}")
            return [], False

        self._write_cache(participant_id, intervals, window)
        logger.info(f"✅ Fetched {len(intervals)} free intervals for {participant_id}")
        return intervals, True

    def _read_fresh_cache(self, participant_id: str,
                          window: TimeInterval) -> Optional[List[TimeInterval]]:
        try:
            last_update = self.cache.get_last_update_time(participant_id)
            if last_update is None or self._clock() - last_update >= self.freshness:
                return None
            cached = self.cache.get_cached(participant_id, window.start, window.end)
            return normalize_intervals(cached, window) if cached else None
        except Exception as e:
            logger.warning(f"Availability cache read failed for {participant_id}: {e}")
            return None

    def _write_cache(self, participant_id: str, intervals: List[TimeInterval], window: TimeInterval):
        try:
            stored = self.cache.store(participant_id, intervals, window.start, window.end)
        except Exception as e:
            logger.warning(f"Failed to cache availability for {participant_id}: {e}")
            return

        if stored is False:
            logger.warning(f"Availability cache rejected data for {participant_id}")
