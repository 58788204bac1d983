"""
Utility modules for Smart Calendar slot finder
"""

from .logger import SmartCalendarLogger
from .validators import RequestValidator, DataSanitizer, SchedulingRequestError
from .meeting_logger import MeetingLogger

__all__ = ['SmartCalendarLogger', 'RequestValidator', 'DataSanitizer', 'SchedulingRequestError', 'MeetingLogger']
