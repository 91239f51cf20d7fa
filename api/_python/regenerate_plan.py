#!/usr/bin/env python3
"""
Regenerate a wake-time realignment plan from a JSON request file.

Usage: python3 regenerate_plan.py <request_file.json>

Reads a plan request (the same body the /api/plan/generate endpoint takes)
and prints the generated plan as JSON to stdout. Errors are printed as
{"error": ...} with exit status 1.
"""

import json
import logging
import sys

from insights_api import generate_plan
from peakshift.errors import MalformedInput


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    if len(argv) != 1:
        print(json.dumps({"error": "Usage: regenerate_plan.py <request_file.json>"}))
        return 1

    request_file = argv[0]

    try:
        with open(request_file) as f:
            data = json.load(f)

        print(json.dumps(generate_plan(data)))
        return 0

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
    except MalformedInput as e:
        print(json.dumps({"error": f"Invalid plan request: {e}"}))
    return 1


if __name__ == "__main__":
    sys.exit(main())
