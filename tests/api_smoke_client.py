"""
Smoke test client for a running Smart Calendar slot finder API
"""
import json
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List
import logging

import requests


def _next_weekday(weekday: int) -> datetime:
    today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


class SmartCalendarTestClient:
    """Test client for the slot finder API"""

    def __init__(self, base_url: str = "http://localhost:5000"):
        self.base_url = base_url
        self.logger = logging.getLogger(__name__)

    def test_health_check(self) -> bool:
        """Test health check endpoint"""
        try:
            response = requests.get(f"{self.base_url}/health", timeout=5)
            if response.status_code == 200:
                self.logger.info("Health check passed")
                return True
            self.logger.error(f"Health check failed: {response.status_code}")
            return False
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Health check error: {e}")
            return False

    def send_slot_request(self, request_data: Dict[str, Any]) -> Dict[str, Any]:
        """Send slot request and return response"""
        try:
            start_time = time.time()

            response = requests.post(
                f"{self.base_url}/slots",
                json=request_data,
                timeout=15,
                headers={'Content-Type': 'application/json'}
            )

            response_time = time.time() - start_time
            self.logger.info(f"Request answered with {response.status_code} (RT: {response_time:.2f}s)")
            return {
                "success": response.ok,
                "data": response.json(),
                "response_time": response_time,
                "status_code": response.status_code
            }

        except requests.exceptions.Timeout:
            self.logger.error("Request timeout")
            return {"success": False, "error": "timeout"}
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.error(f"Request error: {e}")
            return {"success": False, "error": str(e)}

    def validate_response_format(self, request_data: Dict[str, Any],
                                 response_data: Dict[str, Any]) -> Dict[str, Any]:
        """Check the ranking invariants on a slot response"""
        validation_result = {"valid": True, "errors": []}

        def fail(message):
            validation_result["errors"].append(message)
            validation_result["valid"] = False

        slots = response_data.get("slots")
        if not isinstance(slots, list):
            fail("'slots' must be a list")
            return validation_result

        max_results = request_data.get("max_results", 5)
        if len(slots) > max_results:
            fail(f"Returned {len(slots)} slots, more than max_results={max_results}")

        previous = None
        for i, slot in enumerate(slots):
            start = datetime.fromisoformat(slot["start"])
            end = datetime.fromisoformat(slot["end"])
            if end - start != timedelta(minutes=request_data["duration_minutes"]):
                fail(f"Slot {i} has the wrong duration")
            if slot["available_count"] < max(1, slot["total_count"] // 2):
                fail(f"Slot {i} is below quorum")
            if slot["available_count"] + len(slot["unavailable_participants"]) != slot["total_count"]:
                fail(f"Slot {i} participant counts do not add up")
            if previous is not None:
                if slot["score"] > previous["score"]:
                    fail(f"Slot {i} scores higher than slot {i - 1}")
                elif slot["score"] == previous["score"] and start < datetime.fromisoformat(previous["start"]):
                    fail(f"Slot {i} breaks the start-time tie order")
            previous = slot

        return validation_result

    def run_test_suite(self, test_data_file: str = None) -> Dict[str, Any]:
        """Run complete test suite"""
        results = {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "health_check": self.test_health_check(),
            "tests": [],
            "summary": {"total": 0, "passed": 0, "failed": 0, "avg_response_time": 0}
        }

        total_response_time = 0

        for i, test_request in enumerate(self._load_test_data(test_data_file)):
            self.logger.info(f"Running test {i+1}")
            response = self.send_slot_request(test_request)

            test_result = {
                "test_id": i + 1,
                "success": response.get("success", False),
                "response_time": response.get("response_time", 0),
                "validation": {"valid": False}
            }

            if response.get("success"):
                validation = self.validate_response_format(test_request, response["data"])
                test_result["validation"] = validation
                test_result["success"] = validation["valid"]
            else:
                test_result["error"] = response.get("error") or response.get("data")

            results["summary"]["passed" if test_result["success"] else "failed"] += 1
            total_response_time += response.get("response_time", 0)
            results["tests"].append(test_result)
            results["summary"]["total"] += 1

        if results["summary"]["total"] > 0:
            results["summary"]["avg_response_time"] = total_response_time / results["summary"]["total"]

        return results

    def _load_test_data(self, test_data_file: str = None) -> List[Dict[str, Any]]:
        """Load test data from file or create default test cases"""
        if test_data_file:
            with open(test_data_file, 'r') as f:
                return json.load(f)

        tuesday = _next_weekday(1)
        return [
            {
                "participants": ["userone@example.com", "usertwo@example.com", "userthree@example.com"],
                "start": tuesday.isoformat(),
                "end": (tuesday + timedelta(days=3)).isoformat(),
                "duration_minutes": 30,
                "max_results": 5
            },
            {
                "participants": ["userone@example.com"],
                "start": tuesday.isoformat(),
                "end": (tuesday + timedelta(days=1)).isoformat(),
                "duration_minutes": 60,
                "max_results": 3,
                "preferred_time": "14:00"
            }
        ]


def main():
    """Main test execution"""
    import argparse

    parser = argparse.ArgumentParser(description='Smart Calendar smoke test client')
    parser.add_argument('--url', default='http://localhost:5000', help='API base URL')
    parser.add_argument('--test-data', help='Path to test data JSON file')
    parser.add_argument('--output', help='Output file for test results')
    parser.add_argument('--verbose', action='store_true', help='Verbose logging')

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')

    client = SmartCalendarTestClient(args.url)
    print(f"Running tests against {args.url}")
    results = client.run_test_suite(args.test_data)

    summary = results["summary"]
    print(f"\nTest Results:")
    print(f"  Total tests: {summary['total']}")
    print(f"  Passed: {summary['passed']}")
    print(f"  Failed: {summary['failed']}")
    print(f"  Average response time: {summary['avg_response_time']:.2f}s")
    print(f"  Health check: {'✓' if results['health_check'] else '✗'}")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2)
        print(f"\nDetailed results saved to: {args.output}")


if __name__ == '__main__':
    main()
