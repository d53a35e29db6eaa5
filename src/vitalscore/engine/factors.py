"""Factor scorers: one raw metric in, one 0-100 sub-score out.

Every scorer is a pure function of the snapshot fields it needs and returns
``None`` when those fields are absent or unusable, so callers can tell
"not computable" apart from "computed low".  The curves themselves live in
named band tables below so each band can be tested on its own.

A band table is an ordered tuple of :class:`Band` segments.  The first
segment whose closed interval ``[lo, hi]`` contains the value wins, and the
score is interpolated linearly from ``start`` (at ``lo``) to ``end`` (at
``hi``).  Step bands simply have ``start == end``.  Segment order is what
decides which side of a boundary is inclusive.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from vitalscore.snapshot import MetricSnapshot

INF = math.inf


@dataclass(frozen=True)
class Band:
    """A closed interval of a metric mapped onto a score segment."""

    lo: float
    hi: float
    start: float
    end: float

    def contains(self, value: float) -> bool:
        return self.lo <= value <= self.hi

    def score(self, value: float) -> float:
        if self.start == self.end or math.isinf(self.hi) or math.isinf(self.lo):
            return self.start
        frac = (value - self.lo) / (self.hi - self.lo)
        return self.start + frac * (self.end - self.start)


@dataclass(frozen=True)
class FactorResult:
    """One scored metric."""

    name: str
    value: Any  # raw input: a number, or a dict for multi-metric factors
    score: float  # 0-100
    weight: float = 0.0  # filled in by the composite that consumes it
    concern: bool = False  # medical-concern flag

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "score": round(self.score, 1),
            "weight": self.weight,
            "concern": self.concern,
        }


def band_score(value: float, bands: tuple[Band, ...]) -> float:
    """Evaluate a band table, clamped to [0, 100]."""
    for band in bands:
        if band.contains(value):
            return max(0.0, min(100.0, band.score(value)))
    raise ValueError(f"value {value} not covered by band table")


# ---------------------------------------------------------------------------
# Band tables
# ---------------------------------------------------------------------------

# HRV (RMSSD ms), population bands. Higher is better.
HRV_BANDS = (
    Band(80, INF, 100, 100),
    Band(60, 80, 80, 100),
    Band(40, 60, 60, 80),
    Band(25, 40, 40, 60),
    Band(0, 25, 0, 40),
)

# Personal-baseline HRV: 50 + percent deviation, clamped.
HRV_BASELINE_MIDPOINT = 50.0

# Resting heart rate (bpm). Lower is better; 0 at 95 bpm and above.
RHR_BANDS = (
    Band(0, 45, 100, 100),
    Band(45, 55, 90, 80),
    Band(55, 65, 80, 60),
    Band(65, 75, 60, 40),
    Band(75, 95, 40, 0),
    Band(95, INF, 0, 0),
)

# Sleep duration (hours) for recovery.
SLEEP_DURATION_BANDS = (
    Band(7, 9, 100, 100),
    Band(6, 7, 80, 80),
    Band(9, 10, 90, 90),
    Band(5, 6, 60, 60),
    Band(10, INF, 70, 70),
    Band(0, 5, 0, 60),
)

# Sleep quality: (deep + REM) as a percent of total sleep.
SLEEP_QUALITY_BANDS = (
    Band(45, INF, 100, 100),
    Band(35, 45, 80, 100),
    Band(25, 35, 60, 80),
    Band(0, 25, 0, 60),
)

# Breathing rate (breaths/min), centered on 12-16.
BREATHING_RATE_BANDS = (
    Band(12, 16, 100, 100),
    Band(10, 20, 80, 80),
    Band(8, 22, 60, 60),
    Band(0, INF, 40, 40),
)

# Blood oxygen saturation (%).
SPO2_BANDS = (
    Band(96, 100, 100, 100),
    Band(94, 96, 80, 80),
    Band(92, 94, 60, 60),
    Band(90, 92, 40, 40),
    Band(0, 90, 20, 20),
)
SPO2_CONCERN_BELOW = 90.0

# Activity halves, each on 0-100 before the 50/50 blend.
STEPS_BANDS = (
    Band(10000, INF, 100, 100),
    Band(7500, 10000, 80, 80),
    Band(5000, 7500, 60, 60),
    Band(0, 5000, 0, 60),
)
ACTIVE_MINUTES_BANDS = (
    Band(30, INF, 100, 100),
    Band(22, 30, 80, 80),
    Band(15, 22, 60, 60),
    Band(0, 15, 0, 60),
)
ACTIVITY_HALF = 0.5

# Training load: Active Zone Minutes. 22-44 is the sweet spot.
AZM_BANDS = (
    Band(22, 44, 100, 100),
    Band(0, 22, 80, 80),
    Band(44, 66, 70, 70),
    Band(66, 88, 50, 50),
    Band(88, INF, 30, 30),
)

# Sleep debt (hours short of the baseline).
SLEEP_BASELINE_HOURS = 8.0
SLEEP_DEBT_BANDS = (
    Band(-INF, 0, 100, 100),
    Band(0, 1, 85, 85),
    Band(1, 2, 65, 65),
    Band(2, 3, 45, 45),
    Band(3, INF, 25, 25),
)

# Muscle readiness from calories burned; upper bounds exclusive.
MUSCLE_READINESS_BANDS = (
    Band(3500, INF, 40, 40),
    Band(3000, 3500, 55, 55),
    Band(2500, 3000, 70, 70),
    Band(2000, 2500, 85, 85),
    Band(0, 2000, 100, 100),
)

# Wellness sleep (hours), plus an efficiency bonus.
WELLNESS_SLEEP_BANDS = (
    Band(7, 9, 100, 100),
    Band(6, INF, 75, 75),
    Band(5, 6, 50, 50),
    Band(0, 5, 25, 25),
)
SLEEP_EFFICIENCY_BONUS_AT = 85.0
SLEEP_EFFICIENCY_BONUS = 10.0

# Heart health sub-bands.
HEART_RHR_BANDS = (
    Band(0, 60, 100, 100),
    Band(60, 70, 80, 80),
    Band(70, 80, 60, 60),
    Band(80, INF, 40, 40),
)
VO2MAX_BANDS = (
    Band(50, INF, 100, 100),
    Band(40, 50, 80, 80),
    Band(35, 40, 60, 60),
    Band(0, 35, 40, 40),
)

# Stress ("low stress" framing of HRV).
STRESS_BANDS = (
    Band(60, INF, 100, 100),
    Band(45, 60, 80, 80),
    Band(30, 45, 60, 60),
    Band(20, 30, 40, 40),
    Band(0, 20, 20, 20),
)

# Nutrition balance: calories burned - calories consumed.
NUTRITION_BANDS = (
    Band(-200, 200, 100, 100),
    Band(200, 500, 85, 85),
    Band(-300, -200, 80, 80),
    Band(500, INF, 60, 60),
    Band(-INF, -300, 50, 50),
)


# ---------------------------------------------------------------------------
# Input hygiene
# ---------------------------------------------------------------------------


def _usable(
    value: float | None,
    upper: float | None = None,
    positive: bool = False,
) -> bool:
    """True if *value* is present, finite and in its physical range."""
    if value is None or not math.isfinite(value) or value < 0:
        return False
    if positive and value == 0:
        return False
    if upper is not None and value > upper:
        return False
    return True


# ---------------------------------------------------------------------------
# Recovery scorers
# ---------------------------------------------------------------------------


def score_hrv(snapshot: MetricSnapshot) -> FactorResult | None:
    """HRV against the personal baseline if known, else population bands."""
    hrv = snapshot.hrv_ms
    if not _usable(hrv, positive=True):
        return None
    baseline = snapshot.hrv_baseline_ms
    if _usable(baseline, positive=True):
        deviation = (hrv - baseline) / baseline * 100.0
        score = max(0.0, min(100.0, HRV_BASELINE_MIDPOINT + deviation))
    else:
        score = band_score(hrv, HRV_BANDS)
    return FactorResult("hrv", hrv, score)


def score_resting_hr(snapshot: MetricSnapshot) -> FactorResult | None:
    rhr = snapshot.resting_hr
    if not _usable(rhr, positive=True):
        return None
    return FactorResult("resting_hr", rhr, band_score(rhr, RHR_BANDS))


def score_sleep_duration(snapshot: MetricSnapshot) -> FactorResult | None:
    if not _usable(snapshot.sleep_minutes):
        return None
    hours = snapshot.sleep_minutes / 60.0
    return FactorResult(
        "sleep_duration", round(hours, 1), band_score(hours, SLEEP_DURATION_BANDS)
    )


def score_sleep_quality(snapshot: MetricSnapshot) -> FactorResult | None:
    """Deep + REM share of total sleep."""
    total = snapshot.sleep_minutes
    deep = snapshot.deep_sleep_minutes
    rem = snapshot.rem_sleep_minutes
    if not (_usable(total, positive=True) and _usable(deep) and _usable(rem)):
        return None
    if deep > total or rem > total or deep + rem > total:
        return None
    pct = (deep + rem) / total * 100.0
    return FactorResult(
        "sleep_quality", round(pct, 1), band_score(pct, SLEEP_QUALITY_BANDS)
    )


def score_breathing_rate(snapshot: MetricSnapshot) -> FactorResult | None:
    rate = snapshot.breathing_rate
    if not _usable(rate, positive=True):
        return None
    return FactorResult("breathing_rate", rate, band_score(rate, BREATHING_RATE_BANDS))


def score_spo2(snapshot: MetricSnapshot) -> FactorResult | None:
    """Blood oxygen; readings below 90% are flagged as a medical concern."""
    spo2 = snapshot.spo2_avg
    if not _usable(spo2, upper=100.0, positive=True):
        return None
    return FactorResult(
        "spo2", spo2, band_score(spo2, SPO2_BANDS),
        concern=spo2 < SPO2_CONCERN_BELOW,
    )


# ---------------------------------------------------------------------------
# Performance scorers
# ---------------------------------------------------------------------------


def score_training_load(snapshot: MetricSnapshot) -> FactorResult | None:
    azm = snapshot.azm_total
    if not _usable(azm):
        return None
    return FactorResult("training_load", azm, band_score(azm, AZM_BANDS))


def score_sleep_debt(
    snapshot: MetricSnapshot,
    baseline_hours: float = SLEEP_BASELINE_HOURS,
) -> FactorResult | None:
    if not _usable(snapshot.sleep_minutes):
        return None
    debt = baseline_hours - snapshot.sleep_minutes / 60.0
    return FactorResult("sleep_debt", round(debt, 1), band_score(debt, SLEEP_DEBT_BANDS))


def score_muscle_readiness(snapshot: MetricSnapshot) -> FactorResult | None:
    """Calories burned as a proxy for how much the muscles were taxed."""
    kcal = snapshot.calories_burned
    if not _usable(kcal):
        return None
    return FactorResult(
        "muscle_readiness", kcal, band_score(kcal, MUSCLE_READINESS_BANDS)
    )


# ---------------------------------------------------------------------------
# Wellness scorers
# ---------------------------------------------------------------------------


def score_activity(snapshot: MetricSnapshot) -> FactorResult | None:
    """Steps and active minutes, each worth half; a missing half adds nothing."""
    parts: list[float] = []
    value: dict[str, float] = {}
    if _usable(snapshot.steps):
        parts.append(band_score(snapshot.steps, STEPS_BANDS))
        value["steps"] = snapshot.steps
    if _usable(snapshot.active_minutes):
        parts.append(band_score(snapshot.active_minutes, ACTIVE_MINUTES_BANDS))
        value["active_minutes"] = snapshot.active_minutes
    if not parts:
        return None
    score = sum(ACTIVITY_HALF * p for p in parts)
    return FactorResult("activity", value, min(100.0, score))


def score_wellness_sleep(snapshot: MetricSnapshot) -> FactorResult | None:
    """Sleep duration with a bonus for efficient sleep."""
    if not _usable(snapshot.sleep_minutes):
        return None
    hours = snapshot.sleep_minutes / 60.0
    score = band_score(hours, WELLNESS_SLEEP_BANDS)
    value: dict[str, float] = {"hours": round(hours, 1)}
    efficiency = snapshot.sleep_efficiency
    if _usable(efficiency, upper=100.0):
        value["efficiency"] = efficiency
        if efficiency >= SLEEP_EFFICIENCY_BONUS_AT:
            score = min(100.0, score + SLEEP_EFFICIENCY_BONUS)
    return FactorResult("sleep", value, score)


def score_heart_health(snapshot: MetricSnapshot) -> FactorResult | None:
    """Resting HR and VO2max sub-bands, averaged over whichever exist."""
    parts: list[float] = []
    value: dict[str, float] = {}
    if _usable(snapshot.resting_hr, positive=True):
        parts.append(band_score(snapshot.resting_hr, HEART_RHR_BANDS))
        value["resting_hr"] = snapshot.resting_hr
    if _usable(snapshot.vo2_max, positive=True):
        parts.append(band_score(snapshot.vo2_max, VO2MAX_BANDS))
        value["vo2_max"] = snapshot.vo2_max
    if not parts:
        return None
    return FactorResult("heart_health", value, sum(parts) / len(parts))


def score_stress(snapshot: MetricSnapshot) -> FactorResult | None:
    hrv = snapshot.hrv_ms
    if not _usable(hrv, positive=True):
        return None
    return FactorResult("stress", hrv, band_score(hrv, STRESS_BANDS))


def score_nutrition_balance(snapshot: MetricSnapshot) -> FactorResult | None:
    burned = snapshot.calories_burned
    consumed = snapshot.calories_consumed
    if not (_usable(burned) and _usable(consumed)):
        return None
    balance = burned - consumed
    return FactorResult(
        "nutrition",
        {"burned": burned, "consumed": consumed, "balance": balance},
        band_score(balance, NUTRITION_BANDS),
    )
