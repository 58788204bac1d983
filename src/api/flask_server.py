"""
Flask API server exposing the optimal slot finder
"""
import logging
import signal
import sys
import time
from datetime import datetime
from threading import Thread

from flask import Flask, request, jsonify
from flask_cors import CORS

from config.settings import Config
from src.scheduler.smart_scheduler import SmartScheduler
from utils.logger import SmartCalendarLogger
from utils.validators import DataSanitizer, SchedulingRequestError

logger = logging.getLogger(__name__)


class SmartCalendarAPI:
    """
    Thin HTTP adapter translating JSON slot requests into SmartScheduler calls
    """

    def __init__(self, scheduler: SmartScheduler = None):
        self.config = Config()
        self.app = Flask(__name__)
        CORS(self.app)  # Enable CORS for cross-origin requests

        if scheduler is not None:
            self.scheduler = scheduler
        else:
            try:
                self.scheduler = SmartScheduler()
                logger.info("SmartScheduler initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize SmartScheduler: {e}")
                self.scheduler = None

        self.requests_processed = 0
        self.start_time = time.time()

        self._setup_routes()

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/health', methods=['GET'])
        def health_check():
            """Health check endpoint"""
            return jsonify({
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "scheduler_available": self.scheduler is not None
            })

        @self.app.route('/slots', methods=['POST'])
        def find_slots():
            """Rank candidate meeting slots for a group of participants"""
            started = time.time()
            data = request.get_json(silent=True)

            if not data or not isinstance(data, dict):
                logger.error("No JSON data received")
                return jsonify({"errors": ["No JSON object provided"]}), 400

            if self.scheduler is None:
                logger.error("Scheduler not available")
                return jsonify({"error": "Scheduler not initialized"}), 500

            try:
                arguments = DataSanitizer.parse_slot_request(data)
                logger.info(f"🚀 RECEIVED SLOT REQUEST for {len(arguments['participant_ids'])} participants")
                result = self.scheduler.search_slots(**arguments)
            except SchedulingRequestError as e:
                logger.warning(f"Rejected slot request: {e.errors}")
                return jsonify({"errors": e.errors}), 400

            self.requests_processed += 1
            response = result.to_dict()

            processing_time = time.time() - started
            SmartCalendarLogger.log_slot_search(data, response, processing_time)
            if processing_time > self.config.API_TIMEOUT:
                logger.warning(f"⚠️  Processing time ({processing_time:.2f}s) exceeded limit ({self.config.API_TIMEOUT}s)")

            return jsonify(response)

        @self.app.route('/status', methods=['GET'])
        def get_status():
            """Get server status and statistics"""
            return jsonify({
                "status": "running",
                "requests_processed": self.requests_processed,
                "uptime": time.time() - self.start_time,
                "scheduler_available": self.scheduler is not None
            })

        @self.app.errorhandler(404)
        def not_found(error):
            return jsonify({"error": "Endpoint not found"}), 404

        @self.app.errorhandler(405)
        def method_not_allowed(error):
            return jsonify({"error": "Method not allowed"}), 405

        @self.app.errorhandler(500)
        def internal_error(error):
            return jsonify({"error": "Internal server error"}), 500

    def _setup_signal_handlers(self):
        """Setup graceful shutdown handlers"""
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down gracefully...")
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def run(self, host=None, port=None, debug=False):
        """Run the Flask server"""
        host = host or self.config.API_HOST
        port = port or self.config.API_PORT

        self.start_time = time.time()
        self._setup_signal_handlers()

        logger.info(f"Starting Smart Calendar API server on {host}:{port}")
        logger.info(f"Scheduler status: {'Available' if self.scheduler else 'Not Available'}")

        self.app.run(
            host=host,
            port=port,
            debug=debug,
            threaded=True,  # Enable threading for concurrent requests
            use_reloader=False
        )

    def run_background(self, host=None, port=None):
        """Run the Flask server in background thread"""
        def run_server():
            self.app.run(host=host or self.config.API_HOST, port=port or self.config.API_PORT,
                         threaded=True, use_reloader=False)

        server_thread = Thread(target=run_server, daemon=True)
        server_thread.start()
        logger.info("Flask server started in background")
        return server_thread

    def shutdown(self):
        """Graceful shutdown"""
        logger.info("Shutting down Smart Calendar API server...")


def create_app(scheduler: SmartScheduler = None) -> Flask:
    """Factory function to create Flask app"""
    api = SmartCalendarAPI(scheduler)
    return api.app
