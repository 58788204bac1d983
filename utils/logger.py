"""
Logging utilities for the Smart Calendar slot finder
"""
import logging
import sys
from datetime import datetime
import json


class SmartCalendarLogger:
    """Custom logger for Smart Calendar slot finder"""

    @staticmethod
    def setup_logging(log_level: str = "INFO", log_file: str = None):
        """Setup logging configuration"""

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Setup root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper()))

        # Clear existing handlers
        root_logger.handlers.clear()

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        # File handler (if specified)
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        # Suppress some noisy loggers
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('googleapiclient').setLevel(logging.WARNING)
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

        return root_logger

    @staticmethod
    def log_slot_search(request_data: dict, response_data: dict, processing_time: float):
        """Log a slot search request and its response for debugging"""
        logger = logging.getLogger(__name__)

        slots = response_data.get("slots", [])
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "processing_time_seconds": round(processing_time, 3),
            "request_summary": {
                "participants": len(request_data.get("participants", [])),
                "window": [request_data.get("start"), request_data.get("end")],
                "duration_minutes": request_data.get("duration_minutes"),
            },
            "response_summary": {
                "slots_returned": len(slots),
                "best_slot": slots[0].get("start") if slots else None,
                "unchecked_participants": response_data.get("unchecked_participants", []),
            },
        }

        logger.info(f"Slot search processed: {json.dumps(log_entry, indent=2)}")
