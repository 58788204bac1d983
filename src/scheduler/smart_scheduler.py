"""
Smart Scheduler - caller-facing entry point for finding optimal meeting slots
"""
import logging
import time as timer
from dataclasses import dataclass
from datetime import datetime, time
from typing import List, Optional, Tuple

import pytz

from config.settings import Config
from src.calendar.availability_accessor import AvailabilityAccessor
from src.calendar.availability_cache import InMemoryAvailabilityCache
from src.calendar.interfaces import CalendarProvider
from src.scheduler.models import ParticipantId, RankedSlot, SchedulingRequirements, TimeInterval
from src.scheduler.slot_ranker import SlotRanker
from utils.meeting_logger import MeetingLogger
from utils.validators import DataSanitizer, RequestValidator, SchedulingRequestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotSearchResult:
    slots: List[RankedSlot]
    unchecked_participants: Tuple[ParticipantId, ...] = ()
    processing_time: float = 0.0

    @property
    def note(self) -> Optional[str]:
        """Front-end annotation for a partially serviced request"""
        if not self.unchecked_participants:
            return None
        count = len(self.unchecked_participants)
        return f"{count} participant{'s' if count != 1 else ''} could not be checked"

    def to_dict(self) -> dict:
        result = {
            "slots": [slot.to_dict() for slot in self.slots],
            "unchecked_participants": list(self.unchecked_participants),
            "processing_time": f"{self.processing_time:.2f}s",
        }
        if self.note:
            result["message"] = self.note
        return result


def _default_provider(config: Config):
    if config.USE_MOCK_CALENDAR:
        from src.calendar.mock_calendar_manager import MockCalendarProvider
        logger.info("🔄 Using mock calendar provider")
        return MockCalendarProvider()

    from src.calendar.calendar_manager import GoogleCalendarProvider
    logger.info("✅ Using Google Calendar provider")
    return GoogleCalendarProvider(config)


class SmartScheduler:
    """
    Validates slot searches, gathers availability and ranks candidate slots
    """

    def __init__(self, accessor: AvailabilityAccessor = None, ranker: SlotRanker = None,
                 config: Config = None, provider: CalendarProvider = None):
        self.config = config or Config()
        self.accessor = accessor or AvailabilityAccessor(
            provider=provider or _default_provider(self.config),
            cache=InMemoryAvailabilityCache(),
        )
        self.ranker = ranker or SlotRanker()
        logger.info("SmartScheduler initialized")

    def find_optimal_slots(self, participant_ids: List[str], start_date: datetime, end_date: datetime,
                           duration_minutes: int, max_results: int = None,
                           preferred_time_of_day: time = None,
                           working_hours: Tuple[time, time] = None) -> List[RankedSlot]:
        """
        Find the best meeting windows for a group.

        Returns an empty list when no slot qualifies; never more than
        max_results entries.

        Raises:
            SchedulingRequestError: if the request violates the input contract
        """
        return self.search_slots(participant_ids, start_date, end_date, duration_minutes,
                                 max_results, preferred_time_of_day, working_hours).slots

    def search_slots(self, participant_ids: List[str], start_date: datetime, end_date: datetime,
                     duration_minutes: int, max_results: int = None,
                     preferred_time_of_day: time = None,
                     working_hours: Tuple[time, time] = None) -> SlotSearchResult:
        """Same as find_optimal_slots, also reporting participants that could not be checked"""
        started = timer.perf_counter()

        if max_results is None:
            max_results = self.config.DEFAULT_MAX_RESULTS
        participant_ids = DataSanitizer.sanitize_participant_ids(list(participant_ids or []))
        requirements = self._build_requirements(participant_ids, start_date, end_date, duration_minutes,
                                                max_results, preferred_time_of_day, working_hours)
        start_date, end_date = self._in_local_zone(start_date), self._in_local_zone(end_date)

        logger.info(f"🎯 Finding optimal slots for {len(participant_ids)} participants "
                    f"({duration_minutes} min, top {max_results})")

        availability = self.accessor.get_participant_availability(participant_ids, start_date, end_date)
        MeetingLogger.log_team_availability(availability)

        slots = self.ranker.rank(availability, requirements, window=TimeInterval(start_date, end_date))
        MeetingLogger.log_ranked_slots(slots)

        processing_time = timer.perf_counter() - started
        logger.info(f"Slot search completed in {processing_time:.2f} seconds")

        return SlotSearchResult(
            slots=slots,
            unchecked_participants=tuple(pid for pid in participant_ids
                                         if pid in availability.unchecked_participants),
            processing_time=processing_time,
        )

    def _build_requirements(self, participant_ids, start_date, end_date, duration_minutes, max_results,
                            preferred_time_of_day, working_hours) -> SchedulingRequirements:
        errors = RequestValidator.validate_slot_search(
            participant_ids, start_date, end_date, duration_minutes, max_results)

        default_start, default_end = self.config.working_hours()
        hours_start, hours_end = working_hours or (default_start, default_end)
        if hours_start is None or hours_end is None:
            errors.append("Working hours must have both start and end")
        else:
            errors.extend(RequestValidator.validate_working_hours(hours_start, hours_end))

        if errors:
            logger.error(f"Invalid slot search: {errors}")
            raise SchedulingRequestError(errors)

        return SchedulingRequirements(
            duration_minutes=duration_minutes,
            preferred_time_of_day=preferred_time_of_day or self.config.preferred_time_of_day(),
            working_hours_start=hours_start,
            working_hours_end=hours_end,
            max_results=max_results,
        )

    def _in_local_zone(self, moment: datetime) -> datetime:
        """Aware datetimes are ranked on the configured clock; naive ones are already local"""
        if moment.tzinfo is None:
            return moment
        return moment.astimezone(pytz.timezone(self.config.TIMEZONE_NAME))
