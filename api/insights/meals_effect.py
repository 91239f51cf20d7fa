"""
Vercel Python Function for the meal-timing performance summary.

This endpoint handles POST requests to /api/insights/meals_effect. Samples come
from the deployment's sample store, assigned to `handler.store` at startup.
"""

from http.server import BaseHTTPRequestHandler
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add the _python directory to the Python path for importing peakshift
sys.path.insert(0, str(Path(__file__).parent.parent / "_python"))

from insights_api import meals_effect
from peakshift.errors import MalformedInput, UpstreamFetchFailure
from peakshift.store import SampleStore

logger = logging.getLogger(__name__)

MAX_BODY_SIZE = 64 * 1024  # 64KB max request body


class handler(BaseHTTPRequestHandler):
    """HTTP handler for Vercel Python Functions."""

    store: SampleStore | None = None

    def do_POST(self):
        """Handle POST requests for the meal-timing summary."""
        try:
            if self.store is None:
                self._send_json_response(503, {"error": "Sample store not configured"})
                return

            content_length = int(self.headers.get("Content-Length", 0))
            if content_length > MAX_BODY_SIZE:
                self._send_json_response(413, {"error": "Request body too large"})
                return

            body = self.rfile.read(content_length)
            data = json.loads(body)
            if not isinstance(data, dict):
                self._send_json_response(400, {"error": "Request body must be a JSON object"})
                return

            result = asyncio.run(meals_effect(self.store, data))
            if result["status"] == "no sessions":
                self._send_json_response(404, {"error": "no sessions"})
                return
            self._send_json_response(200, result)

        except json.JSONDecodeError:
            self._send_json_response(400, {"error": "Invalid JSON in request body"})
        except MalformedInput as e:
            self._send_json_response(400, {"error": str(e)})
        except UpstreamFetchFailure as e:
            logger.error(f"Sample store read failed: {e}")
            self._send_json_response(502, {"error": "Sample store unavailable"})
        except Exception as e:
            logger.exception("Meal effect summary failed")
            self._send_json_response(500, {"error": f"Meal effect summary failed: {str(e)}"})

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
