"""Shared fixtures and helpers for the vitalscore test suite."""

from __future__ import annotations

import json
from datetime import date, timedelta
from pathlib import Path

import pytest

from vitalscore.snapshot import ActiveZoneMinutes, HeartRateZone, MetricSnapshot
from vitalscore.engine.composite import CompositeScore
from vitalscore.engine.grading import grade
from vitalscore.engine.strain import StrainScore

DAY = date(2026, 2, 13)


# ---------------------------------------------------------------------------
# Snapshot builders
# ---------------------------------------------------------------------------


def make_snapshot(**overrides) -> MetricSnapshot:
    """Build an "ideal day" snapshot; every factor scores 100.

    - HRV 80 ms, RHR 45 bpm, 8 h sleep with 45.8% deep+REM
    - breathing 14/min, SpO2 97%
    - 10k steps, 30 active minutes, 30 AZM, 1900 kcal burned and eaten
    """
    fields = dict(
        subject_id="subject-1",
        source="fitbit",
        day=DAY,
        hrv_ms=80.0,
        resting_hr=45.0,
        sleep_minutes=480.0,
        deep_sleep_minutes=110.0,
        rem_sleep_minutes=110.0,
        sleep_efficiency=90.0,
        breathing_rate=14.0,
        spo2_avg=97.0,
        steps=10000.0,
        active_minutes=30.0,
        active_zone_minutes=ActiveZoneMinutes(total=30.0, fat_burn=20.0, cardio=8.0, peak=2.0),
        calories_burned=1900.0,
        heart_rate_zones=(
            HeartRateZone("Out of Range", 600.0),
            HeartRateZone("Fat Burn", 40.0),
            HeartRateZone("Cardio", 20.0),
            HeartRateZone("Peak", 5.0),
        ),
        vo2_max=52.0,
        calories_consumed=1900.0,
    )
    fields.update(overrides)
    return MetricSnapshot(**fields)


def make_empty_snapshot(**overrides) -> MetricSnapshot:
    """Build a snapshot with identity only; nothing is computable."""
    fields = dict(subject_id="subject-1", source="fitbit", day=DAY)
    fields.update(overrides)
    return MetricSnapshot(**fields)


def make_history(
    days: int,
    end: date = DAY,
    **series,
) -> list[MetricSnapshot]:
    """Build *days* consecutive empty snapshots ending on *end*.

    Each keyword is a field name mapped to a list of per-day values
    (oldest first), e.g. ``make_history(4, steps=[1, 2, 3, 4])``.
    """
    start = end - timedelta(days=days - 1)
    snapshots = []
    for i in range(days):
        fields = {name: values[i] for name, values in series.items()}
        snapshots.append(make_empty_snapshot(day=start + timedelta(days=i), **fields))
    return snapshots


def make_composite(
    name: str,
    score: int,
    insufficient_data: bool = False,
) -> CompositeScore:
    """Build a bare CompositeScore for rule tests."""
    return CompositeScore(
        name=name,
        score=score,
        grade=grade(score),
        status="test",
        message="",
        factors=(),
        insufficient_data=insufficient_data,
    )


def make_strain(score: float) -> StrainScore:
    return StrainScore(score=score, level="test", description="", recommendation="")


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def write_jsonl(path: Path, entries: list[dict]) -> Path:
    """Write a list of dicts as JSONL to the given path."""
    with open(path, "w") as f:
        for entry in entries:
            f.write(json.dumps(entry) + "\n")
    return path


@pytest.fixture
def ideal_snapshot() -> MetricSnapshot:
    return make_snapshot()


@pytest.fixture
def empty_snapshot() -> MetricSnapshot:
    return make_empty_snapshot()
