"""
Validation utilities for the Smart Calendar slot finder
"""
from datetime import datetime, time
from typing import Any, Dict, List, Optional

import pytz

from config.settings import Config


class SchedulingRequestError(ValueError):
    """A slot search request violates the input contract"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class RequestValidator:
    """Validator for incoming slot search requests"""

    @staticmethod
    def validate_slot_search(participant_ids: List[str], start_date: datetime, end_date: datetime,
                             duration_minutes: int, max_results: int) -> List[str]:
        """Validate a slot search and return list of errors"""
        errors = []

        if not participant_ids:
            errors.append("At least one participant is required")
        elif any(not isinstance(pid, str) or not pid.strip() for pid in participant_ids):
            errors.append("Participant identifiers must be non-empty strings")

        if not isinstance(duration_minutes, int) or isinstance(duration_minutes, bool) or duration_minutes <= 0:
            errors.append(f"Duration must be a positive number of minutes: {duration_minutes}")
        elif duration_minutes > Config.MAX_MEETING_DURATION:
            errors.append(f"Duration exceeds maximum of {Config.MAX_MEETING_DURATION} minutes: {duration_minutes}")

        if not isinstance(max_results, int) or isinstance(max_results, bool) or max_results <= 0:
            errors.append(f"max_results must be a positive integer: {max_results}")

        if not isinstance(start_date, datetime) or not isinstance(end_date, datetime):
            errors.append("Start and end dates must be datetimes")
        elif (start_date.tzinfo is None) != (end_date.tzinfo is None):
            errors.append("Start and end dates must both be timezone-aware or both naive")
        elif start_date >= end_date:
            errors.append(f"Start date must be before end date: {start_date.isoformat()} >= {end_date.isoformat()}")
        elif (end_date - start_date).days > Config.MAX_SEARCH_DAYS:
            errors.append(f"Search window exceeds {Config.MAX_SEARCH_DAYS} days")

        return errors

    @staticmethod
    def validate_working_hours(start: time, end: time) -> List[str]:
        if start >= end:
            return [f"Working hours start must be before end: {start} >= {end}"]
        return []


class DataSanitizer:
    """Sanitize and clean input data"""

    @staticmethod
    def sanitize_participant_ids(participant_ids: List[str]) -> List[str]:
        """Strip whitespace and drop duplicates, keeping first-seen order"""
        seen = []
        for pid in participant_ids:
            cleaned = pid.strip() if isinstance(pid, str) else pid
            if cleaned not in seen:
                seen.append(cleaned)
        return seen

    @staticmethod
    def parse_datetime(value: str, field: str, errors: List[str]) -> Optional[datetime]:
        """Parse an ISO-8601 datetime; naive values are localised to the configured zone"""
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            errors.append(f"Invalid {field} datetime: {value}. Expected ISO-8601")
            return None

        if parsed.tzinfo is None:
            parsed = pytz.timezone(Config.TIMEZONE_NAME).localize(parsed)
        return parsed

    @staticmethod
    def parse_time_of_day(value: str, field: str, errors: List[str]) -> Optional[time]:
        try:
            return time.fromisoformat(str(value))
        except ValueError:
            errors.append(f"Invalid {field} time: {value}. Expected HH:MM")
            return None

    @staticmethod
    def parse_slot_request(request_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Turn a JSON slot request into keyword arguments for SmartScheduler.

        Raises:
            SchedulingRequestError: if fields are missing or malformed
        """
        errors = []

        for field in ("participants", "start", "end", "duration_minutes"):
            if field not in request_data:
                errors.append(f"Missing required field: {field}")
        if errors:
            raise SchedulingRequestError(errors)

        participants = request_data["participants"]
        if not isinstance(participants, list):
            errors.append("'participants' must be a list")
            participants = []

        parsed = {
            "participant_ids": DataSanitizer.sanitize_participant_ids(participants),
            "start_date": DataSanitizer.parse_datetime(request_data["start"], "start", errors),
            "end_date": DataSanitizer.parse_datetime(request_data["end"], "end", errors),
            "duration_minutes": request_data["duration_minutes"],
            "max_results": request_data.get("max_results", Config.DEFAULT_MAX_RESULTS),
        }

        if "preferred_time" in request_data:
            parsed["preferred_time_of_day"] = DataSanitizer.parse_time_of_day(
                request_data["preferred_time"], "preferred_time", errors)

        working_hours = request_data.get("working_hours")
        if working_hours is not None:
            if not isinstance(working_hours, dict) or "start" not in working_hours or "end" not in working_hours:
                errors.append("'working_hours' must have 'start' and 'end'")
            else:
                parsed["working_hours"] = (
                    DataSanitizer.parse_time_of_day(working_hours["start"], "working_hours.start", errors),
                    DataSanitizer.parse_time_of_day(working_hours["end"], "working_hours.end", errors),
                )

        if errors:
            raise SchedulingRequestError(errors)

        return parsed
