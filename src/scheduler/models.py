"""
Data shapes shared by the availability accessor, candidate generator and ranker
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Dict, FrozenSet, Iterable, Iterator, NewType, Optional, Tuple

ParticipantId = NewType("ParticipantId", str)


@dataclass(frozen=True, order=True)
class TimeInterval:
    """Half-open time window [start, end)"""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Interval start must be before end: {self.start} >= {self.end}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, other: "TimeInterval") -> bool:
        return self.start <= other.start and self.end >= other.end

    def overlaps(self, other: "TimeInterval") -> bool:
        return self.start < other.end and self.end > other.start

    def clip(self, window: "TimeInterval") -> Optional["TimeInterval"]:
        """Intersection with window, or None when they do not overlap"""
        start = max(self.start, window.start)
        end = min(self.end, window.end)
        if start >= end:
            return None
        return TimeInterval(start, end)

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


class ParticipantAvailability(Mapping):
    """
    Read-only map of participant id -> free intervals (sorted by start).

    Built once by the availability accessor and never mutated afterwards.
    Participants whose calendar could not be fetched are present with an
    empty tuple and listed in ``unchecked_participants``.
    """

    def __init__(self, free_intervals: Mapping = None,
                 unchecked_participants: Iterable[str] = ()):
        self._data: Dict[ParticipantId, Tuple[TimeInterval, ...]] = {
            ParticipantId(pid): tuple(sorted(intervals))
            for pid, intervals in (free_intervals or {}).items()
        }
        self._unchecked = frozenset(ParticipantId(pid) for pid in unchecked_participants)

    @property
    def unchecked_participants(self) -> FrozenSet[ParticipantId]:
        return self._unchecked

    def __getitem__(self, participant_id: str) -> Tuple[TimeInterval, ...]:
        return self._data[participant_id]

    def __iter__(self) -> Iterator[ParticipantId]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        counts = ", ".join(f"{pid}: {len(intervals)}" for pid, intervals in self._data.items())
        return f"ParticipantAvailability({{{counts}}})"


@dataclass(frozen=True)
class SchedulingRequirements:
    duration_minutes: int
    preferred_time_of_day: time = time(10, 0)
    working_hours_start: time = time(9, 0)
    working_hours_end: time = time(17, 0)
    max_results: int = 5

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)


@dataclass(frozen=True)
class ScoringWeights:
    """Weight table for slot scoring; every term is additive"""

    attendance_scale: float = 100.0
    full_attendance_bonus: float = 25.0
    working_hours_bonus: float = 20.0
    preferred_time_bonus: float = 15.0
    preferred_time_window_hours: float = 2.0
    morning_bonus: float = 10.0
    morning_start: time = time(9, 0)
    morning_end: time = time(12, 0)
    quarter_alignment_bonus: float = 5.0
    late_afternoon_penalty: float = 5.0
    late_afternoon_start: time = time(16, 0)
    weekend_penalty: float = 15.0
    midweek_bonus: float = 5.0
    midweek_days: FrozenSet[int] = frozenset({1, 2, 3})  # Tuesday-Thursday


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class ParticipantConflict:
    participant_id: ParticipantId
    reason: str
    conflict_start: Optional[datetime] = None
    conflict_end: Optional[datetime] = None

    def to_dict(self) -> Dict:
        return {
            "participant_id": self.participant_id,
            "reason": self.reason,
            "conflict_start": self.conflict_start.isoformat() if self.conflict_start else None,
            "conflict_end": self.conflict_end.isoformat() if self.conflict_end else None,
        }


@dataclass(frozen=True)
class RankedSlot:
    start: datetime
    end: datetime
    score: float
    available_count: int
    total_count: int
    available_participant_ids: Tuple[ParticipantId, ...] = ()
    unavailable_participants: Tuple[ParticipantConflict, ...] = field(default=())

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def availability_percentage(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.available_count / self.total_count * 100

    def to_dict(self) -> Dict:
        """Convert to dictionary format for JSON serialization"""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_minutes": int(self.duration.total_seconds() // 60),
            "score": round(self.score, 2),
            "available_count": self.available_count,
            "total_count": self.total_count,
            "available_participants": list(self.available_participant_ids),
            "unavailable_participants": [c.to_dict() for c in self.unavailable_participants],
        }
