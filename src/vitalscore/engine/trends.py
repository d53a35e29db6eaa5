"""Trend analysis over a lookback window of daily snapshots.

Each tracked metric is split at the window midpoint into an early and a
late half.  The late-half mean is compared with the early-half mean and a
change beyond the threshold (5% by default) is called improving or
declining, taking into account whether higher values are better.

The same window also yields per-metric averages and, over longer
histories, a deload assessment based on recovery.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from vitalscore.snapshot import MetricSnapshot
from vitalscore.engine.factors import _usable
from vitalscore.engine.recovery import score_recovery

DEFAULT_THRESHOLD_PCT = 5.0


class TrendDirection(str, Enum):
    """Direction of a metric over the window."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


def _recovery_value(snapshot: MetricSnapshot) -> float | None:
    result = score_recovery(snapshot)
    return None if result.insufficient_data else float(result.score)


def _field(name: str, positive: bool = False) -> Callable[[MetricSnapshot], float | None]:
    """Extractor that drops values the factor scorers would reject."""

    def extract(snapshot: MetricSnapshot) -> float | None:
        value = getattr(snapshot, name)
        return value if _usable(value, positive=positive) else None

    return extract


# (name, extractor, higher_is_better)
TREND_METRICS: tuple[tuple[str, Callable[[MetricSnapshot], float | None], bool], ...] = (
    ("steps", _field("steps"), True),
    ("sleep", _field("sleep_minutes"), True),
    ("hrv", _field("hrv_ms", positive=True), True),
    ("resting_hr", _field("resting_hr", positive=True), False),
    ("recovery", _recovery_value, True),
)


@dataclass(frozen=True)
class TrendReport:
    """Per-metric directions and averages over one window.

    The two mappings are wrapped read-only on construction.
    """

    days: int
    start: str | None  # ISO date of the oldest snapshot
    end: str | None
    directions: Mapping[str, TrendDirection] = field(default_factory=dict)
    averages: Mapping[str, float | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "directions", MappingProxyType(dict(self.directions)))
        object.__setattr__(self, "averages", MappingProxyType(dict(self.averages)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": self.days,
            "start": self.start,
            "end": self.end,
            "directions": {k: v.value for k, v in self.directions.items()},
            "averages": dict(self.averages),
        }


@dataclass(frozen=True)
class DeloadAdvice:
    """Whether accumulated fatigue calls for a deload."""

    recommend: bool
    reason: str
    severity: str | None = None  # "light-deload" / "full-deload"
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Trend direction
# ---------------------------------------------------------------------------


def metric_trend(
    values: Sequence[float | None],
    higher_is_better: bool = True,
    threshold_pct: float = DEFAULT_THRESHOLD_PCT,
) -> TrendDirection:
    """Compare late-half and early-half means of an ordered series.

    Missing entries (``None``, NaN) are dropped within each half after the split,
    so the halves are always the two halves of the calendar window.
    """
    mid = len(values) // 2
    early = [v for v in values[:mid] if v is not None and math.isfinite(v)]
    late = [v for v in values[mid:] if v is not None and math.isfinite(v)]
    if not early or not late:
        return TrendDirection.STABLE

    early_mean = float(np.mean(early))
    late_mean = float(np.mean(late))
    if early_mean == 0:
        if late_mean == 0:
            return TrendDirection.STABLE
        change_pct = float(np.sign(late_mean)) * np.inf
    else:
        change_pct = (late_mean - early_mean) / abs(early_mean) * 100.0

    if not higher_is_better:
        change_pct = -change_pct

    if change_pct > threshold_pct:
        return TrendDirection.IMPROVING
    if change_pct < -threshold_pct:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def _mean(values: Sequence[float | None]) -> float | None:
    present = [v for v in values if v is not None and math.isfinite(v)]
    if not present:
        return None
    return round(float(np.mean(present)), 1)


def analyze_trends(
    snapshots: Sequence[MetricSnapshot],
    threshold_pct: float = DEFAULT_THRESHOLD_PCT,
) -> TrendReport:
    """Compute trend directions and averages for every tracked metric.

    Args:
        snapshots: One subject's snapshots; sorted oldest to newest here.
        threshold_pct: Percent change needed to leave "stable".
    """
    ordered = sorted(snapshots, key=lambda s: s.day)
    directions: dict[str, TrendDirection] = {}
    averages: dict[str, float | None] = {}

    for name, extract, higher_is_better in TREND_METRICS:
        series = [extract(s) for s in ordered]
        directions[name] = metric_trend(series, higher_is_better, threshold_pct)
        averages[name] = _mean(series)

    return TrendReport(
        days=len(ordered),
        start=ordered[0].day.isoformat() if ordered else None,
        end=ordered[-1].day.isoformat() if ordered else None,
        directions=directions,
        averages=averages,
    )


# ---------------------------------------------------------------------------
# Deload assessment
# ---------------------------------------------------------------------------

DELOAD_MIN_DAYS = 14
LOW_RECOVERY = 60
DECLINE_LIGHT = 10.0
DECLINE_FULL = 15.0
LOW_SHARE_LIGHT = 0.5
LOW_SHARE_FULL = 0.7

FULL_DELOAD_SUGGESTION = "Take a full deload week: reduce volume 50%, intensity 60-70%"
LIGHT_DELOAD_SUGGESTION = "Take a light deload: reduce volume 30%, maintain intensity"


def assess_deload(snapshots: Sequence[MetricSnapshot]) -> DeloadAdvice:
    """Recommend a deload when recovery declines or stays low.

    Needs at least two weeks of snapshots.  The window is halved; a drop of
    more than 10 points in mean recovery, or more than half of the late
    days under 60, triggers a light deload.  Beyond 15 points or 70% low
    days it becomes a full deload.
    """
    if len(snapshots) < DELOAD_MIN_DAYS:
        return DeloadAdvice(False, "Insufficient data for deload analysis")

    ordered = sorted(snapshots, key=lambda s: s.day)
    recoveries = [_recovery_value(s) for s in ordered]
    mid = len(recoveries) // 2
    early_mean = _mean(recoveries[:mid])
    late_mean = _mean(recoveries[mid:])
    if early_mean is None or late_mean is None:
        return DeloadAdvice(False, "Insufficient recovery data for deload analysis")

    late = recoveries[mid:]
    decline = early_mean - late_mean
    low_share = sum(1 for r in late if r is not None and r < LOW_RECOVERY) / len(late)

    if decline <= DECLINE_LIGHT and low_share <= LOW_SHARE_LIGHT:
        return DeloadAdvice(False, "Recovery metrics stable")

    full = decline > DECLINE_FULL or low_share > LOW_SHARE_FULL
    span_days = (ordered[-1].day - ordered[0].day).days + 1
    if decline > DECLINE_LIGHT:
        reason = f"Recovery declining ({round(decline)} points over {span_days} days)"
    else:
        reason = f"{round(low_share * 100)}% of recent days below threshold"

    return DeloadAdvice(
        recommend=True,
        reason=reason,
        severity="full-deload" if full else "light-deload",
        suggestion=FULL_DELOAD_SUGGESTION if full else LIGHT_DELOAD_SUGGESTION,
    )
