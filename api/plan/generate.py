"""
Vercel Python Function for wake-time plan generation.

This endpoint handles POST requests to /api/plan/generate and returns a
day-by-day plan that walks wake time from currentWake to targetWake.
"""

from http.server import BaseHTTPRequestHandler
import json
import logging
import sys
from pathlib import Path

# Add the _python directory to the Python path for importing peakshift
sys.path.insert(0, str(Path(__file__).parent.parent / "_python"))

from insights_api import generate_plan
from peakshift.errors import MalformedInput

logger = logging.getLogger(__name__)

MAX_BODY_SIZE = 64 * 1024  # 64KB max request body


class handler(BaseHTTPRequestHandler):
    """HTTP handler for Vercel Python Functions."""

    def do_POST(self):
        """Handle POST requests for plan generation."""
        try:
            content_length = int(self.headers.get("Content-Length", 0))
            if content_length > MAX_BODY_SIZE:
                self._send_json_response(413, {"error": "Request body too large"})
                return

            body = self.rfile.read(content_length)
            data = json.loads(body)

            self._send_json_response(200, generate_plan(data))

        except json.JSONDecodeError:
            self._send_json_response(400, {"error": "Invalid JSON in request body"})
        except MalformedInput as e:
            self._send_json_response(400, {"error": str(e)})
        except Exception as e:
            logger.exception("Plan generation failed")
            self._send_json_response(500, {"error": f"Plan generation failed: {str(e)}"})

    def _send_json_response(self, status_code: int, data: dict):
        """Send a JSON response with the given status code."""
        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Access-Control-Allow-Origin", "*")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def do_OPTIONS(self):
        """Handle CORS preflight requests."""
        self.send_response(200)
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "POST, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")
        self.end_headers()
