"""
Specialized logging for availability lookups and slot ranking results
"""
import logging
from typing import List

from src.scheduler.models import ParticipantAvailability, RankedSlot

logger = logging.getLogger(__name__)


class MeetingLogger:
    """Specialized logger for slot search events"""

    @staticmethod
    def log_team_availability(availability: ParticipantAvailability):
        """Log each member's free time before ranking"""

        logger.info(f"👥 TEAM AVAILABILITY ANALYSIS")
        logger.info(f"   📊 Team size: {len(availability)} members")

        for member, intervals in availability.items():
            free_minutes = sum(interval.duration.total_seconds() for interval in intervals) / 60

            if member in availability.unchecked_participants:
                logger.info(f"   ❓ {member}: calendar could not be checked")
            elif not intervals:
                logger.info(f"   ⛔ {member}: no free time in window")
            else:
                logger.info(f"   ✅ {member}: {len(intervals)} free intervals, {free_minutes:.0f} minutes free")

        if availability.unchecked_participants:
            logger.warning(f"   ⚠️  {len(availability.unchecked_participants)} participants could not be checked")

    @staticmethod
    def log_ranked_slots(slots: List[RankedSlot], limit: int = 3):
        """Log the top of the ranking"""

        if not slots:
            logger.info(f"❌ No qualifying slots found")
            return

        logger.info(f"🎯 TOP SLOTS ({len(slots)} returned):")
        for i, slot in enumerate(slots[:limit], 1):
            logger.info(f"   {i}. {slot.start.isoformat()} to {slot.end.isoformat()} "
                        f"score={slot.score:.1f} ({slot.available_count}/{slot.total_count} available)")
            for conflict in slot.unavailable_participants:
                logger.info(f"      ⛔ {conflict.participant_id}: {conflict.reason}")
