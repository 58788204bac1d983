"""
Tests for quarter-hour candidate generation.
"""
from datetime import time

from conftest import SATURDAY, TUESDAY, WEDNESDAY, at, availability, interval
from src.scheduler.models import SchedulingRequirements
from src.scheduler.slot_generator import (
    align_to_quarter_hour,
    generate_candidate_starts,
    is_within_working_hours,
)


class TestAlignment:
    def test_floors_to_quarter_hour(self):
        assert align_to_quarter_hour(at(TUESDAY, 9, 7)) == at(TUESDAY, 9, 0)
        assert align_to_quarter_hour(at(TUESDAY, 9, 44)) == at(TUESDAY, 9, 30)
        assert align_to_quarter_hour(at(TUESDAY, 9, 45)) == at(TUESDAY, 9, 45)

    def test_drops_seconds(self):
        assert align_to_quarter_hour(TUESDAY.replace(hour=9, minute=16, second=30, microsecond=5)) == at(TUESDAY, 9, 15)


class TestWorkingHours:
    def test_window_is_inclusive(self):
        requirements = SchedulingRequirements(duration_minutes=30)
        assert is_within_working_hours(at(TUESDAY, 9), requirements)
        assert is_within_working_hours(at(TUESDAY, 17), requirements)
        assert not is_within_working_hours(at(TUESDAY, 8, 45), requirements)
        assert not is_within_working_hours(at(TUESDAY, 17, 15), requirements)

    def test_weekends_excluded(self):
        requirements = SchedulingRequirements(duration_minutes=30)
        assert not is_within_working_hours(at(SATURDAY, 10), requirements)


class TestGenerateCandidateStarts:
    def test_full_working_day_hourly_meeting(self, requirements_60):
        free = availability(**{"a@x.com": [interval(TUESDAY, "09:00", "17:00")]})

        starts = generate_candidate_starts(free, requirements_60)

        assert len(starts) == 29
        assert starts[0] == at(TUESDAY, 9)
        assert starts[-1] == at(TUESDAY, 16)
        assert all(start.minute % 15 == 0 for start in starts)

    def test_misaligned_interval_start_is_floored(self):
        requirements = SchedulingRequirements(duration_minutes=30)
        free = availability(**{"a@x.com": [interval(TUESDAY, "10:07", "11:00")]})

        # 10:00 is the floored start; the ranker later rejects it as not fully free
        assert generate_candidate_starts(free, requirements) == [
            at(TUESDAY, 10, 0), at(TUESDAY, 10, 15), at(TUESDAY, 10, 30),
        ]

    def test_short_interval_contributes_nothing(self, requirements_60):
        free = availability(**{"a@x.com": [interval(TUESDAY, "10:00", "10:45")]})
        assert generate_candidate_starts(free, requirements_60) == []

    def test_participant_without_intervals_does_not_block_others(self, requirements_60):
        free = availability(**{"a@x.com": [], "b@x.com": [interval(TUESDAY, "10:00", "11:00")]})
        assert generate_candidate_starts(free, requirements_60) == [at(TUESDAY, 10)]

    def test_overlapping_participants_are_deduplicated_and_sorted(self, requirements_60):
        free = availability(**{
            "a@x.com": [interval(WEDNESDAY, "10:00", "12:00"), interval(TUESDAY, "15:00", "16:00")],
            "b@x.com": [interval(WEDNESDAY, "09:00", "11:00")],
        })

        starts = generate_candidate_starts(free, requirements_60)

        assert starts == sorted(set(starts))
        assert starts[0] == at(TUESDAY, 15)
        assert starts.count(at(WEDNESDAY, 10)) == 1

    def test_starts_outside_working_hours_or_on_weekends_skipped(self):
        requirements = SchedulingRequirements(duration_minutes=60,
                                              working_hours_start=time(9), working_hours_end=time(10))
        free = availability(**{
            "a@x.com": [interval(TUESDAY, "07:00", "12:00"), interval(SATURDAY, "09:00", "12:00")],
        })

        assert generate_candidate_starts(free, requirements) == [
            at(TUESDAY, 9, 0), at(TUESDAY, 9, 15), at(TUESDAY, 9, 30), at(TUESDAY, 9, 45), at(TUESDAY, 10, 0),
        ]

    def test_no_availability_yields_no_candidates(self, requirements_60):
        assert generate_candidate_starts(availability(**{"a@x.com": [], "b@x.com": []}), requirements_60) == []
