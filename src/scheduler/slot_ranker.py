"""
Slot evaluation and ranking

Pure functions over in-memory availability: no I/O, no input validation and
no mutation of the arguments, so one ranker can be shared between threads.
"""
import logging
from datetime import datetime, time
from typing import List, Optional, Sequence, Tuple

from config.settings import Config
from src.scheduler.models import (
    DEFAULT_WEIGHTS,
    ParticipantAvailability,
    ParticipantConflict,
    ParticipantId,
    RankedSlot,
    SchedulingRequirements,
    ScoringWeights,
    TimeInterval,
)
from src.scheduler.slot_generator import generate_candidate_starts, is_weekend

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Not available"


def _hours_between(first: time, second: time) -> float:
    first_minutes = first.hour * 60 + first.minute + first.second / 60
    second_minutes = second.hour * 60 + second.minute + second.second / 60
    return abs(first_minutes - second_minutes) / 60


def quorum(total_count: int) -> int:
    """Minimum attendees for a slot to be worth ranking"""
    return max(1, total_count // 2)


def score_slot(start: datetime, available_count: int, total_count: int,
               requirements: SchedulingRequirements,
               weights: ScoringWeights = DEFAULT_WEIGHTS) -> float:
    """Multi-factor suitability score, clamped at zero"""
    score = available_count / total_count * weights.attendance_scale

    if available_count == total_count:
        score += weights.full_attendance_bonus

    time_of_day = start.time()
    if requirements.working_hours_start <= time_of_day <= requirements.working_hours_end:
        score += weights.working_hours_bonus

    distance = _hours_between(time_of_day, requirements.preferred_time_of_day)
    if distance <= weights.preferred_time_window_hours:
        score += weights.preferred_time_bonus * (1 - distance / weights.preferred_time_window_hours)

    if weights.morning_start <= time_of_day < weights.morning_end:
        score += weights.morning_bonus

    if start.minute % 15 == 0:
        score += weights.quarter_alignment_bonus

    if time_of_day >= weights.late_afternoon_start:
        score -= weights.late_afternoon_penalty

    if is_weekend(start):
        score -= weights.weekend_penalty

    if start.weekday() in weights.midweek_days:
        score += weights.midweek_bonus

    return max(0.0, score)


def busy_blocks(free_intervals: Sequence[TimeInterval],
                window: Optional[TimeInterval] = None) -> List[TimeInterval]:
    """
    Busy view of a participant: the gaps between consecutive free intervals.

    With a search window, the stretches between the window edges and the
    first/last free interval count as busy too. A participant with no free
    intervals has no busy view (their calendar state is unknown).
    """
    if not free_intervals:
        return []

    ordered = sorted(free_intervals)
    blocks = []

    if window is not None and window.start < ordered[0].start:
        blocks.append(TimeInterval(window.start, ordered[0].start))

    cursor = ordered[0].end
    for interval in ordered[1:]:
        if interval.start > cursor:
            blocks.append(TimeInterval(cursor, interval.start))
        cursor = max(cursor, interval.end)

    if window is not None and cursor < window.end:
        blocks.append(TimeInterval(cursor, window.end))

    return blocks


class SlotRanker:
    """Evaluates candidate starts against every participant and ranks them"""

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS):
        self.weights = weights

    def rank(self, availability: ParticipantAvailability,
             requirements: SchedulingRequirements,
             window: Optional[TimeInterval] = None) -> List[RankedSlot]:
        """
        Score every candidate slot and return the best ``max_results``.

        Args:
            availability: Free intervals per participant
            requirements: Duration, time-of-day preferences and result limit
            window: Search window, used to extend the busy view to its edges

        Returns:
            Slots sorted by score (highest first), ties broken by earliest start
        """
        total_count = len(availability)
        if total_count == 0:
            return []

        duration = requirements.duration
        minimum = quorum(total_count)
        busy_views = {
            pid: busy_blocks(intervals, window) for pid, intervals in availability.items()
        }

        ranked_slots = []
        candidates = generate_candidate_starts(availability, requirements)

        for start in candidates:
            slot = TimeInterval(start, start + duration)
            available_ids, conflicts = self._evaluate(slot, availability, busy_views)

            if len(available_ids) < minimum:
                continue

            ranked_slots.append(RankedSlot(
                start=slot.start,
                end=slot.end,
                score=score_slot(start, len(available_ids), total_count, requirements, self.weights),
                available_count=len(available_ids),
                total_count=total_count,
                available_participant_ids=tuple(available_ids),
                unavailable_participants=tuple(conflicts),
            ))

        ranked_slots.sort(key=lambda ranked: (-ranked.score, ranked.start))

        logger.info(f"Ranked {len(ranked_slots)} of {len(candidates)} candidate slots "
                    f"(quorum {minimum}/{total_count})")
        return ranked_slots[:requirements.max_results]

    def _evaluate(self, slot: TimeInterval, availability: ParticipantAvailability,
                  busy_views: dict) -> Tuple[List[ParticipantId], List[ParticipantConflict]]:
        available_ids = []
        conflicts = []

        for participant_id, intervals in availability.items():
            if any(interval.contains(slot) for interval in intervals):
                available_ids.append(participant_id)
            else:
                conflicts.append(self._conflict_for(participant_id, slot, busy_views[participant_id]))

        return available_ids, conflicts

    @staticmethod
    def _conflict_for(participant_id: ParticipantId, slot: TimeInterval,
                      busy: Sequence[TimeInterval]) -> ParticipantConflict:
        blocking = next((block for block in busy if block.overlaps(slot)), None)
        if blocking is None:
            return ParticipantConflict(participant_id=participant_id, reason=NOT_AVAILABLE)

        return ParticipantConflict(
            participant_id=participant_id,
            reason=f"Meeting until {blocking.end.strftime(Config.CONFLICT_TIME_FORMAT)}",
            conflict_start=blocking.start,
            conflict_end=blocking.end,
        )


def find_ranked_slots(availability: ParticipantAvailability,
                      requirements: SchedulingRequirements,
                      window: Optional[TimeInterval] = None,
                      weights: ScoringWeights = DEFAULT_WEIGHTS) -> List[RankedSlot]:
    """Convenience wrapper around SlotRanker.rank"""
    return SlotRanker(weights).rank(availability, requirements, window)
