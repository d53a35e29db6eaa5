"""Daily metric snapshots: one subject, one source, one calendar day.

A :class:`MetricSnapshot` is the only input the engine consumes.  Every
numeric field is optional; ``None`` means "not measured", which is never the
same thing as zero.  Snapshots arrive from a device-sync layer as JSON, so
this module also knows how to parse them (snake_case or the sync layer's
camelCase keys) from a dict, a JSON file, or a JSONL history file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class InvalidSnapshotError(ValueError):
    """Raised for a structurally invalid snapshot (no subject id or date)."""


@dataclass(frozen=True)
class HeartRateZone:
    """Minutes spent in one named heart-rate zone."""

    name: str  # "Out of Range", "Fat Burn", "Cardio", "Peak"
    minutes: float = 0.0


@dataclass(frozen=True)
class ActiveZoneMinutes:
    """Active Zone Minutes, total plus per-zone breakdown."""

    total: float
    fat_burn: float | None = None
    cardio: float | None = None
    peak: float | None = None


@dataclass(frozen=True)
class MetricSnapshot:
    """One day's measurements for one subject from one provider."""

    subject_id: str
    source: str
    day: date

    # Cardiac
    hrv_ms: float | None = None  # RMSSD
    hrv_baseline_ms: float | None = None
    resting_hr: float | None = None

    # Sleep
    sleep_minutes: float | None = None
    deep_sleep_minutes: float | None = None
    rem_sleep_minutes: float | None = None
    sleep_efficiency: float | None = None  # percent, 0-100

    # Respiratory
    breathing_rate: float | None = None  # breaths/min
    spo2_avg: float | None = None  # percent

    # Activity
    steps: float | None = None
    active_minutes: float | None = None
    active_zone_minutes: ActiveZoneMinutes | None = None
    calories_burned: float | None = None
    heart_rate_zones: tuple[HeartRateZone, ...] = field(default_factory=tuple)
    vo2_max: float | None = None

    # Nutrition
    calories_consumed: float | None = None

    @property
    def sleep_hours(self) -> float | None:
        if self.sleep_minutes is None:
            return None
        return self.sleep_minutes / 60.0

    @property
    def azm_total(self) -> float | None:
        if self.active_zone_minutes is None:
            return None
        return self.active_zone_minutes.total

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        d = asdict(self)
        d["day"] = self.day.isoformat()
        d["heart_rate_zones"] = [asdict(z) for z in self.heart_rate_zones]
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetricSnapshot":
        """Build a snapshot from a sync-layer record.

        Accepts the snake_case field names of this class as well as the
        camelCase names used by the device-sync payloads.

        Raises:
            InvalidSnapshotError: If the subject id or date is missing or
                the date cannot be parsed.
        """
        if not isinstance(data, dict):
            raise InvalidSnapshotError(
                f"snapshot must be a JSON object, got {type(data).__name__}"
            )
        subject = _first(data, "subject_id", "subjectId", "userId")
        day_raw = _first(data, "day", "date")
        if not subject:
            raise InvalidSnapshotError("snapshot has no subject id")
        if day_raw is None:
            raise InvalidSnapshotError(f"snapshot for {subject!r} has no date")

        return cls(
            subject_id=str(subject),
            source=str(_first(data, "source", "provider") or "manual"),
            day=_parse_day(day_raw),
            hrv_ms=_num(_first(data, "hrv_ms", "hrv")),
            hrv_baseline_ms=_num(_first(data, "hrv_baseline_ms", "hrvBaseline")),
            resting_hr=_num(_first(data, "resting_hr", "restingHeartRate")),
            sleep_minutes=_num(_first(data, "sleep_minutes", "sleepDuration")),
            deep_sleep_minutes=_num(_first(data, "deep_sleep_minutes", "deepSleep")),
            rem_sleep_minutes=_num(_first(data, "rem_sleep_minutes", "remSleep")),
            sleep_efficiency=_num(_first(data, "sleep_efficiency", "sleepEfficiency")),
            breathing_rate=_num(_first(data, "breathing_rate", "breathingRate")),
            spo2_avg=_num(_first(data, "spo2_avg", "spo2Avg")),
            steps=_num(data.get("steps")),
            active_minutes=_num(_first(data, "active_minutes", "activeMinutes")),
            active_zone_minutes=_parse_azm(
                _first(data, "active_zone_minutes", "activeZoneMinutes")
            ),
            calories_burned=_num(_first(data, "calories_burned", "caloriesBurned")),
            heart_rate_zones=_parse_zones(
                _first(data, "heart_rate_zones", "heartRateZones")
            ),
            vo2_max=_num(_first(data, "vo2_max", "vo2Max")),
            calories_consumed=_num(
                _first(data, "calories_consumed", "nutritionCalories", "caloriesIn")
            ),
        )


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _num(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_day(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        # "2026-02-13" or a full ISO timestamp
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidSnapshotError(f"unparseable snapshot date: {text!r}") from None


def _parse_azm(value: Any) -> ActiveZoneMinutes | None:
    if value is None:
        return None
    if isinstance(value, ActiveZoneMinutes):
        return value
    if isinstance(value, dict):
        total = _num(value.get("total"))
        if total is None:
            return None
        return ActiveZoneMinutes(
            total=total,
            fat_burn=_num(_first(value, "fat_burn", "fatBurn")),
            cardio=_num(value.get("cardio")),
            peak=_num(value.get("peak")),
        )
    total = _num(value)
    return ActiveZoneMinutes(total=total) if total is not None else None


def _parse_zones(value: Any) -> tuple[HeartRateZone, ...]:
    if not value:
        return ()
    zones = []
    for z in value:
        if isinstance(z, HeartRateZone):
            zones.append(z)
        elif isinstance(z, dict) and z.get("name"):
            zones.append(HeartRateZone(
                name=str(z["name"]),
                minutes=_num(z.get("minutes")) or 0.0,
            ))
    return tuple(zones)


# ---------------------------------------------------------------------------
# Validation and loading
# ---------------------------------------------------------------------------


def validate_snapshot(snapshot: MetricSnapshot) -> MetricSnapshot:
    """Reject a snapshot the engine cannot be invoked on.

    Only identity is checked here; out-of-range numbers are left for the
    factor scorers to treat as not computable.
    """
    if not snapshot.subject_id:
        raise InvalidSnapshotError("snapshot has no subject id")
    if not isinstance(snapshot.day, date):
        raise InvalidSnapshotError(
            f"snapshot for {snapshot.subject_id!r} has no calendar date"
        )
    return snapshot


def load_snapshots(path: str | Path) -> list[MetricSnapshot]:
    """Load snapshots from a JSON file (object or array) or a JSONL file.

    The result is sorted oldest to newest.

    Raises:
        InvalidSnapshotError: On malformed JSON or an invalid record.
    """
    path = Path(path)
    text = path.read_text()

    records: list[dict[str, Any]] = []
    stripped = text.lstrip()
    if path.suffix != ".jsonl" and stripped.startswith(("{", "[")):
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidSnapshotError(f"{path.name}: invalid JSON ({e})") from e
        records = payload if isinstance(payload, list) else [payload]
    else:
        for line_num, line in enumerate(text.splitlines(), 1):
            line = line.strip()
            if not line:
                logger.debug("%s: skipping blank line %d", path.name, line_num)
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise InvalidSnapshotError(
                    f"{path.name}: invalid JSON on line {line_num} ({e})"
                ) from e

    snapshots = [MetricSnapshot.from_dict(r) for r in records]
    snapshots.sort(key=lambda s: s.day)
    logger.debug("Loaded %d snapshot(s) from %s", len(snapshots), path)
    return snapshots
