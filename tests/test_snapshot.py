"""Tests for vitalscore.snapshot -- parsing, validation and loading."""

import json
from datetime import date

import pytest

from tests.conftest import DAY, make_empty_snapshot, make_snapshot, write_jsonl
from vitalscore.snapshot import (
    ActiveZoneMinutes,
    HeartRateZone,
    InvalidSnapshotError,
    MetricSnapshot,
    load_snapshots,
    validate_snapshot,
)


class TestFromDict:
    def test_snake_case(self):
        snap = MetricSnapshot.from_dict({
            "subject_id": "u1",
            "source": "whoop",
            "day": "2026-02-13",
            "hrv_ms": 62,
            "resting_hr": 51,
            "sleep_minutes": 450,
        })
        assert snap.subject_id == "u1"
        assert snap.source == "whoop"
        assert snap.day == DAY
        assert snap.hrv_ms == 62.0
        assert snap.sleep_hours == 7.5

    def test_camel_case_sync_payload(self):
        snap = MetricSnapshot.from_dict({
            "userId": 42,
            "provider": "fitbit",
            "date": "2026-02-13T06:30:00Z",
            "restingHeartRate": 55,
            "sleepDuration": 420,
            "deepSleep": 80,
            "remSleep": 90,
            "breathingRate": 14.5,
            "spo2Avg": 96.2,
            "activeZoneMinutes": {"total": 35, "fatBurn": 20, "cardio": 10, "peak": 5},
            "heartRateZones": [
                {"name": "Fat Burn", "minutes": 40},
                {"name": "Peak"},
                {"minutes": 10},
            ],
            "caloriesBurned": 2400,
            "nutritionCalories": 2100,
        })
        assert snap.subject_id == "42"
        assert snap.day == DAY
        assert snap.active_zone_minutes == ActiveZoneMinutes(35.0, 20.0, 10.0, 5.0)
        assert snap.heart_rate_zones == (
            HeartRateZone("Fat Burn", 40.0), HeartRateZone("Peak", 0.0),
        )
        assert snap.calories_consumed == 2100.0

    def test_defaults(self):
        snap = MetricSnapshot.from_dict({"subject_id": "u1", "day": "2026-02-13"})
        assert snap.source == "manual"
        assert snap.hrv_ms is None
        assert snap.heart_rate_zones == ()
        assert snap.azm_total is None

    def test_azm_as_number(self):
        snap = MetricSnapshot.from_dict(
            {"subject_id": "u1", "day": "2026-02-13", "active_zone_minutes": 12}
        )
        assert snap.azm_total == 12.0

    def test_non_numeric_values_dropped(self):
        snap = MetricSnapshot.from_dict({
            "subject_id": "u1", "day": "2026-02-13",
            "steps": "lots", "hrv_ms": True, "resting_hr": "58",
        })
        assert snap.steps is None
        assert snap.hrv_ms is None
        assert snap.resting_hr == 58.0

    @pytest.mark.parametrize("payload", [
        {"day": "2026-02-13"},
        {"subject_id": "", "day": "2026-02-13"},
        {"subject_id": "u1"},
        {"subject_id": "u1", "day": "yesterday"},
        ["not", "a", "dict"],
    ])
    def test_invalid(self, payload):
        with pytest.raises(InvalidSnapshotError):
            MetricSnapshot.from_dict(payload)

    def test_to_dict_round_trip(self):
        snap = make_snapshot()
        assert MetricSnapshot.from_dict(snap.to_dict()) == snap

    def test_to_dict_is_json_friendly(self):
        d = make_snapshot().to_dict()
        assert d["day"] == "2026-02-13"
        json.dumps(d)


class TestValidateSnapshot:
    def test_valid(self):
        snap = make_empty_snapshot()
        assert validate_snapshot(snap) is snap

    def test_missing_subject(self):
        with pytest.raises(InvalidSnapshotError, match="subject"):
            validate_snapshot(make_empty_snapshot(subject_id=""))

    def test_missing_day(self):
        with pytest.raises(InvalidSnapshotError, match="date"):
            validate_snapshot(make_empty_snapshot(day=None))

    def test_out_of_range_values_pass(self):
        snap = make_empty_snapshot(hrv_ms=-3.0, spo2_avg=140.0)
        assert validate_snapshot(snap) is snap

    def test_is_value_error(self):
        assert issubclass(InvalidSnapshotError, ValueError)


class TestLoadSnapshots:
    def test_jsonl_sorted(self, tmp_path):
        path = write_jsonl(tmp_path / "history.jsonl", [
            {"subject_id": "u1", "day": "2026-02-13", "steps": 3},
            {"subject_id": "u1", "day": "2026-02-11", "steps": 1},
            {"subject_id": "u1", "day": "2026-02-12", "steps": 2},
        ])
        snaps = load_snapshots(path)
        assert [s.steps for s in snaps] == [1.0, 2.0, 3.0]
        assert snaps[-1].day == date(2026, 2, 13)

    def test_jsonl_skips_blank_lines(self, tmp_path):
        path = tmp_path / "history.jsonl"
        path.write_text(
            '{"subject_id": "u1", "day": "2026-02-12"}\n'
            "\n"
            '{"subject_id": "u1", "day": "2026-02-13"}\n'
        )
        assert len(load_snapshots(path)) == 2

    def test_jsonl_bad_line(self, tmp_path):
        path = tmp_path / "history.jsonl"
        path.write_text('{"subject_id": "u1", "day": "2026-02-12"}\n{oops\n')
        with pytest.raises(InvalidSnapshotError, match="line 2"):
            load_snapshots(path)

    def test_json_object(self, tmp_path):
        path = tmp_path / "today.json"
        path.write_text(json.dumps({"subject_id": "u1", "day": "2026-02-13"}))
        snaps = load_snapshots(path)
        assert len(snaps) == 1
        assert snaps[0].subject_id == "u1"

    def test_json_array(self, tmp_path):
        path = tmp_path / "days.json"
        path.write_text(json.dumps([
            {"subject_id": "u1", "day": "2026-02-13"},
            {"subject_id": "u1", "day": "2026-02-12"},
        ]))
        snaps = load_snapshots(path)
        assert [s.day.day for s in snaps] == [12, 13]

    def test_json_invalid(self, tmp_path):
        path = tmp_path / "today.json"
        path.write_text("{not json")
        with pytest.raises(InvalidSnapshotError, match="invalid JSON"):
            load_snapshots(path)

    def test_invalid_record(self, tmp_path):
        path = write_jsonl(tmp_path / "h.jsonl", [{"day": "2026-02-13"}])
        with pytest.raises(InvalidSnapshotError):
            load_snapshots(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.jsonl"
        path.write_text("")
        assert load_snapshots(path) == []
