#!/usr/bin/env python3
"""
Main entry point for the Smart Calendar slot finder

Runs the HTTP API, answers a single slot search from the command line, or
runs the smoke test client against a server.
"""

import json
import logging
import sys
import time

from config.settings import Config
from src.api.flask_server import SmartCalendarAPI
from src.calendar.mock_calendar_manager import MockCalendarProvider
from src.scheduler.smart_scheduler import SmartScheduler
from utils.logger import SmartCalendarLogger
from utils.validators import DataSanitizer, SchedulingRequestError


def _build_scheduler(use_mock: bool) -> SmartScheduler:
    if use_mock:
        return SmartScheduler(provider=MockCalendarProvider())
    return SmartScheduler()


def find_slots(request_data, use_mock=False):
    """
    Answer one slot search request.

    Args:
        request_data (dict): {participants, start, end, duration_minutes, max_results?, ...}
        use_mock (bool): serve availability from the mock calendar

    Returns:
        dict: ranked slots plus the participants that could not be checked
    """
    logger = logging.getLogger(__name__)

    arguments = DataSanitizer.parse_slot_request(request_data)
    scheduler = _build_scheduler(use_mock)
    result = scheduler.search_slots(**arguments)

    logger.info(f"Slot search returned {len(result.slots)} slots")
    return result.to_dict()


def run_server(host=None, port=None, use_mock=False):
    """Run the Flask API server"""
    logger = logging.getLogger(__name__)
    logger.info("Starting Smart Calendar slot finder API...")

    try:
        api = SmartCalendarAPI(_build_scheduler(use_mock))
        api.run(host=host, port=port)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")


def run_tests(api_url=None, local=False):
    """Run the HTTP smoke tests, optionally against a local mock-backed server"""
    from tests.api_smoke_client import SmartCalendarTestClient

    logger = logging.getLogger(__name__)

    if local:
        api = SmartCalendarAPI(_build_scheduler(use_mock=True))
        api.run_background(host="127.0.0.1", port=Config.API_PORT)
        api_url = f"http://127.0.0.1:{Config.API_PORT}"
        time.sleep(1)

    api_url = api_url or f"http://localhost:{Config.API_PORT}"
    logger.info(f"Running tests against {api_url}")

    client = SmartCalendarTestClient(api_url)
    results = client.run_test_suite()

    summary = results["summary"]
    print(f"\nTest Results:")
    print(f"  Total: {summary['total']}")
    print(f"  Passed: {summary['passed']}")
    print(f"  Failed: {summary['failed']}")
    print(f"  Success rate: {(summary['passed']/summary['total']*100) if summary['total'] > 0 else 0:.1f}%")
    print(f"  Avg response time: {summary['avg_response_time']:.2f}s")

    return results


def main():
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Smart Calendar slot finder')
    parser.add_argument('--log-level', default='INFO', help='Logging level')
    parser.add_argument('--log-file', help='Also write logs to this file')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    server_parser = subparsers.add_parser('server', help='Run API server')
    server_parser.add_argument('--host', default=None, help='Host to bind to')
    server_parser.add_argument('--port', type=int, default=None, help='Port to bind to')
    server_parser.add_argument('--mock', action='store_true', help='Use the mock calendar provider')

    test_parser = subparsers.add_parser('test', help='Run HTTP smoke tests')
    test_parser.add_argument('--url', default=None, help='API URL to test')
    test_parser.add_argument('--local', action='store_true', help='Start a mock-backed server first')

    find_parser = subparsers.add_parser('find', help='Find optimal slots for one request')
    find_parser.add_argument('participants', nargs='*', help='Participant identifiers (emails)')
    find_parser.add_argument('--input', help='Read the request from a JSON file instead')
    find_parser.add_argument('--start', help='Window start (ISO-8601)')
    find_parser.add_argument('--end', help='Window end (ISO-8601)')
    find_parser.add_argument('--duration', type=int, default=Config.DEFAULT_MEETING_DURATION,
                             help='Meeting duration in minutes')
    find_parser.add_argument('--max-results', type=int, default=Config.DEFAULT_MAX_RESULTS)
    find_parser.add_argument('--mock', action='store_true', help='Use the mock calendar provider')
    find_parser.add_argument('--output', help='Output JSON file')

    args = parser.parse_args()
    SmartCalendarLogger.setup_logging(log_level=args.log_level, log_file=args.log_file)

    if args.command == 'server':
        run_server(host=args.host, port=args.port, use_mock=args.mock)

    elif args.command == 'test':
        run_tests(api_url=args.url, local=args.local)

    elif args.command == 'find':
        if args.input:
            with open(args.input, 'r') as f:
                request_data = json.load(f)
        else:
            request_data = {
                "participants": args.participants,
                "start": args.start,
                "end": args.end,
                "duration_minutes": args.duration,
                "max_results": args.max_results,
            }
            request_data = {key: value for key, value in request_data.items() if value is not None}

        try:
            result = find_slots(request_data, use_mock=args.mock)
        except SchedulingRequestError as e:
            for error in e.errors:
                print(f"error: {error}", file=sys.stderr)
            sys.exit(2)

        if args.output:
            with open(args.output, 'w') as f:
                json.dump(result, f, indent=2)
        else:
            print(json.dumps(result, indent=2))

    else:
        parser.print_help()


if __name__ == '__main__':
    main()
