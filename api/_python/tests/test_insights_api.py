"""Tests for request parsing, response bodies and the plan CLI."""

import json
import sys
from pathlib import Path

import pytest
import time_machine

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import peak_at_14_features, session_doc
from insights_api import generate_plan, meals_effect, peak_window, plan_request_from_dict
from peakshift.errors import MalformedInput, MalformedTime
from regenerate_plan import main

CLIENT_BODY = {
    "tz": "America/Los_Angeles",
    "currentWake": "08:30",
    "targetWake": "06:30",
    "sleepNeedMin": 540,
    "direction": "advance",
    "days": 1,
}


class TestPlanRequestParsing:
    """Client payload -> ShiftPlanRequest."""

    def test_camel_case_payload(self):
        request = plan_request_from_dict(CLIENT_BODY)
        assert request.current_wake == "08:30"
        assert request.target_wake == "06:30"
        assert request.sleep_need_minutes == 540
        assert request.days == 1

    def test_snake_case_payload(self):
        request = plan_request_from_dict(
            {"current_wake": "07:00", "target_wake": "08:00", "direction": "delay"}
        )
        assert request.tz == "UTC"
        assert request.days == 7
        assert request.sleep_need_minutes == 540

    @pytest.mark.parametrize("field", ["currentWake", "targetWake", "direction"])
    def test_missing_required_field(self, field):
        body = {k: v for k, v in CLIENT_BODY.items() if k != field}
        with pytest.raises(MalformedInput, match=f"Missing required field: {field}"):
            plan_request_from_dict(body)

    def test_malformed_wake_time(self):
        with pytest.raises(MalformedTime):
            plan_request_from_dict({**CLIENT_BODY, "currentWake": "8:30am"})

    @pytest.mark.parametrize("value", [480.5, "480", float("inf"), True])
    def test_non_integral_sleep_need(self, value):
        with pytest.raises(MalformedInput):
            plan_request_from_dict({**CLIENT_BODY, "sleepNeedMin": value})

    def test_integral_float_days_accepted(self):
        assert plan_request_from_dict({**CLIENT_BODY, "days": 3.0}).days == 3

    def test_body_must_be_object(self):
        with pytest.raises(MalformedInput):
            plan_request_from_dict(["08:30", "06:30"])


class TestGeneratePlan:
    @time_machine.travel("2026-01-15T17:00:00Z", tick=False)
    def test_response_body(self):
        body = generate_plan(CLIENT_BODY)

        assert len(body["plan"]) == 1
        day = body["plan"][0]
        assert day["date"] == "2026-01-15"
        assert day["wake"] == "08:00"
        assert day["bed"] == "23:00"
        assert day["light_seek"] == [["08:15", "09:00"]]
        assert day["light_avoid"] == [["20:00", "23:00"]]
        assert day["exercise_window"] == ["10:00", "12:00"]
        assert day["meals"]["breakfast_by"] == "09:30"
        assert day["meals"]["dinner_end_by"] == "20:00"

    def test_body_is_json_serializable(self):
        json.dumps(generate_plan({**CLIENT_BODY, "days": 7}))


class TestInsightsBodies:
    @pytest.mark.asyncio
    async def test_peak_window_body(self, store):
        store.add_features("u1", peak_at_14_features())

        body = await peak_window(store, {"uid": "u1", "lookback": 200})

        assert body["best"]["start_hour"] == 14
        assert body["best"]["end_hour"] == 16
        assert body["label"] == "Best 2h: 14:00–16:00 (6 sessions)"
        assert body["status"] is None
        json.dumps(body)

    @pytest.mark.asyncio
    async def test_peak_window_unavailable_body(self, store):
        body = await peak_window(store, {"uid": "u1"})
        assert body["best"] is None
        assert body["label"] == "Peak window unavailable."
        assert body["status"].startswith("Not enough recent sessions")

    @pytest.mark.asyncio
    async def test_meals_effect_body(self, store):
        store.add_sessions(
            "u1",
            [session_doc(9, 300, mins_since_last_meal=45), session_doc(9, 320, mins_since_last_meal=200)],
        )

        body = await meals_effect(store, {"uid": "u1", "lookbackDays": 36500})

        assert [row["bucket"] for row in body["summary"]] == ["≤90m", "90–180m", ">180m"]
        assert set(body["summary"][0]) == {"bucket", "n", "medianScore"}
        json.dumps(body)

    @pytest.mark.asyncio
    async def test_uid_required(self, store):
        with pytest.raises(MalformedInput, match="uid required"):
            await meals_effect(store, {})
        with pytest.raises(MalformedInput, match="uid required"):
            await peak_window(store, {"uid": ""})

    @pytest.mark.asyncio
    async def test_max_sessions_clamped(self, store):
        await meals_effect(store, {"uid": "u1", "maxSessions": 10_000})
        assert store.limits[0] == ("features", 500)


class TestRegeneratePlanCli:
    def test_prints_plan(self, tmp_path, capsys):
        request_file = tmp_path / "request.json"
        request_file.write_text(json.dumps({**CLIENT_BODY, "days": 4}))

        assert main([str(request_file)]) == 0

        body = json.loads(capsys.readouterr().out)
        assert [d["wake"] for d in body["plan"]] == ["08:00", "07:30", "07:00", "06:30"]

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "absent.json")]) == 1
        assert "Request file not found" in json.loads(capsys.readouterr().out)["error"]

    def test_invalid_request(self, tmp_path, capsys):
        request_file = tmp_path / "request.json"
        request_file.write_text(json.dumps({**CLIENT_BODY, "direction": "north"}))

        assert main([str(request_file)]) == 1
        assert "Invalid plan request" in json.loads(capsys.readouterr().out)["error"]

    def test_usage(self, capsys):
        assert main([]) == 1
        assert "Usage" in json.loads(capsys.readouterr().out)["error"]
