"""Strain / training load scoring (additive zone-minute model).

Unlike the composites, strain accumulates: minutes in each named
heart-rate zone are multiplied by a fixed per-zone coefficient and summed,
Active Zone Minutes and excess calories are added on top, and the total is
clamped onto the 0-21 scale.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Any

from vitalscore.snapshot import MetricSnapshot


# ---------------------------------------------------------------------------
# Coefficients
# ---------------------------------------------------------------------------

# Strain per minute in each named HR zone (names compared lower-case)
ZONE_MULTIPLIERS = {
    "out of range": 0.01,
    "fat burn": 0.05,
    "cardio": 0.15,
    "peak": 0.30,
}

AZM_MULTIPLIER = 0.1

# Calories above the baseline add 2 strain per 1000 kcal
CALORIE_BASELINE = 2000.0
CALORIE_STRAIN_PER_1000 = 2.0

STRAIN_MAX = 21.0

# (minimum strain, level, description, recommendation), highest first
STRAIN_LEVELS = (
    (18.0, "all-out", "Maximum effort day",
     "Very high strain - ensure adequate recovery in coming days"),
    (14.0, "strenuous", "High intensity training",
     "High strain day - good stimulus for adaptation"),
    (10.0, "moderate", "Solid training session",
     "Moderate strain - balanced training day"),
    (6.0, "light", "Light activity day",
     "Light strain - good for active recovery"),
    (0.0, "minimal", "Rest or very light activity",
     "Minimal strain - rest day or very light activity"),
)


@dataclass(frozen=True)
class StrainScore:
    """Strain score and its qualitative level."""

    score: float  # 0-21, one decimal
    level: str
    description: str
    recommendation: str
    insufficient_data: bool = False  # no zone, AZM or calorie data at all

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __repr__(self) -> str:
        return f"StrainScore(score={self.score:.1f}/21, level={self.level})"


def _level(strain: float) -> tuple[str, str, str]:
    for minimum, level, description, rec in STRAIN_LEVELS:
        if strain >= minimum:
            return level, description, rec
    _, level, description, rec = STRAIN_LEVELS[-1]
    return level, description, rec


def _usable(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value >= 0


def zone_strain(snapshot: MetricSnapshot) -> float:
    """Strain contributed by heart-rate zone minutes alone."""
    total = 0.0
    for zone in snapshot.heart_rate_zones:
        multiplier = ZONE_MULTIPLIERS.get(zone.name.strip().lower())
        if multiplier is None or not _usable(zone.minutes):
            continue
        total += zone.minutes * multiplier
    return total


def score_strain(snapshot: MetricSnapshot) -> StrainScore:
    """Compute the day's strain on the 0-21 scale."""
    has_data = False
    strain = 0.0

    if snapshot.heart_rate_zones:
        has_data = True
        strain += zone_strain(snapshot)

    azm = snapshot.azm_total
    if _usable(azm):
        has_data = True
        strain += azm * AZM_MULTIPLIER

    kcal = snapshot.calories_burned
    if _usable(kcal):
        has_data = True
        if kcal > CALORIE_BASELINE:
            strain += (kcal - CALORIE_BASELINE) / 1000.0 * CALORIE_STRAIN_PER_1000

    strain = max(0.0, min(STRAIN_MAX, strain))
    # half-up to one decimal; the level follows the reported score
    score = int(strain * 10 + 0.5) / 10
    level, description, rec = _level(score)

    return StrainScore(
        score=score,
        level=level,
        description=description,
        recommendation=rec,
        insufficient_data=not has_data,
    )
