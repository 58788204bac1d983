"""
Candidate start-time generation for the slot ranker
"""
import logging
from datetime import datetime, timedelta
from typing import List, Set

from src.scheduler.models import ParticipantAvailability, SchedulingRequirements

logger = logging.getLogger(__name__)

QUARTER_HOUR = timedelta(minutes=15)


def align_to_quarter_hour(moment: datetime) -> datetime:
    """Floor a datetime to the quarter hour at or before it (00, 15, 30, 45)"""
    return moment.replace(minute=(moment.minute // 15) * 15, second=0, microsecond=0)


def is_weekend(moment: datetime) -> bool:
    return moment.weekday() >= 5


def is_within_working_hours(moment: datetime, requirements: SchedulingRequirements) -> bool:
    """Weekday start whose time of day falls inside the working-hours window"""
    if is_weekend(moment):
        return False

    time_of_day = moment.time()
    return requirements.working_hours_start <= time_of_day <= requirements.working_hours_end


def generate_candidate_starts(availability: ParticipantAvailability,
                              requirements: SchedulingRequirements) -> List[datetime]:
    """
    Build the deterministic set of quarter-hour aligned start times worth evaluating.

    Every free interval of every participant contributes the aligned starts
    whose full meeting duration still fits inside that interval. Starts
    outside working hours or on weekends are skipped.

    Returns:
        Deduplicated start times sorted ascending
    """
    duration = requirements.duration
    candidates: Set[datetime] = set()

    for intervals in availability.values():
        for interval in intervals:
            current = align_to_quarter_hour(interval.start)

            while current + duration <= interval.end:
                if is_within_working_hours(current, requirements):
                    candidates.add(current)
                current += QUARTER_HOUR

    logger.debug(f"Generated {len(candidates)} candidate starts for {len(availability)} participants")
    return sorted(candidates)
