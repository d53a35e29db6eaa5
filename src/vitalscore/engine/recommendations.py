"""Rule-based recommendation synthesis and training clearance.

Rules are evaluated top to bottom and several may fire at once.  Score
rules only look at composites that actually had data; a composite without
usable inputs gets a single low-priority "insufficient data" advisory
instead.  The final list is ordered high, medium, low, keeping rule order
within a priority.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any

from vitalscore.engine.composite import CompositeScore
from vitalscore.engine.strain import StrainScore
from vitalscore.engine.trends import TrendReport


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True)
class Advisory:
    """One prioritized recommendation."""

    priority: Priority
    category: str
    title: str
    message: str
    action: str

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["priority"] = self.priority.value
        return d


@dataclass(frozen=True)
class TrainingClearance:
    """Exercise categories bucketed into cleared / caution / avoid."""

    tier: str
    cleared: tuple[str, ...]
    caution: tuple[str, ...]
    avoid: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier,
            "cleared": list(self.cleared),
            "caution": list(self.caution),
            "avoid": list(self.avoid),
        }


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

RECOVERY_DEFICIT_BELOW = 50
PEAK_PERFORMANCE_AT = 80
PEAK_RECOVERY_AT = 70
HIGH_STRAIN_ABOVE = 15.0
STRAINED_RECOVERY_BELOW = 60
WELLNESS_CHECK_BELOW = 60

# History-window thresholds
AVG_SLEEP_MIN_BELOW = 420  # 7 h
AVG_STEPS_BELOW = 8000
AVG_HRV_BELOW = 40
AVG_RECOVERY_BELOW = 50


# ---------------------------------------------------------------------------
# Training clearance tiers
# ---------------------------------------------------------------------------

FULL_CLEARANCE = TrainingClearance(
    tier="full",
    cleared=(
        "heavy compound lifts",
        "high-intensity intervals",
        "competition prep",
        "max attempts",
    ),
    caution=("multiple high-intensity sessions", "extended duration workouts"),
    avoid=(),
)

MODERATE_CLEARANCE = TrainingClearance(
    tier="moderate",
    cleared=("moderate intensity training", "technique work", "hypertrophy training"),
    caution=("heavy singles", "high-volume sessions"),
    avoid=("PR attempts", "competition-style training"),
)

RESTRICTED_CLEARANCE = TrainingClearance(
    tier="restricted",
    cleared=("light cardio", "mobility work", "stretching"),
    caution=("any high-intensity work",),
    avoid=("heavy compound lifts", "high-intensity intervals", "extended sessions"),
)

FULL_CLEARANCE_AT = 70
PARTIAL_CLEARANCE_AT = 50


def training_clearance(
    recovery: CompositeScore,
    performance: CompositeScore,
) -> TrainingClearance:
    """Pick the clearance tier from Recovery and Performance Readiness."""
    if recovery.score >= FULL_CLEARANCE_AT and performance.score >= FULL_CLEARANCE_AT:
        return FULL_CLEARANCE
    if recovery.score >= PARTIAL_CLEARANCE_AT or performance.score >= PARTIAL_CLEARANCE_AT:
        return MODERATE_CLEARANCE
    return RESTRICTED_CLEARANCE


# ---------------------------------------------------------------------------
# Advisory rules
# ---------------------------------------------------------------------------


def _score_rules(
    recovery: CompositeScore,
    performance: CompositeScore,
    wellness: CompositeScore,
    strain: StrainScore,
) -> list[Advisory]:
    recs: list[Advisory] = []
    has_recovery = not recovery.insufficient_data
    has_performance = not performance.insufficient_data

    if has_recovery and recovery.score < RECOVERY_DEFICIT_BELOW:
        recs.append(Advisory(
            Priority.HIGH, "recovery", "Recovery Deficit",
            "Your body needs rest. Consider a light day or complete rest.",
            "Take a recovery day",
        ))

    if (
        has_recovery and has_performance
        and performance.score >= PEAK_PERFORMANCE_AT
        and recovery.score >= PEAK_RECOVERY_AT
    ):
        recs.append(Advisory(
            Priority.HIGH, "performance", "Peak Day",
            "Excellent readiness detected. Great day for high-intensity "
            "training or testing.",
            "Go for that PR",
        ))

    if (
        has_recovery
        and strain.score > HIGH_STRAIN_ABOVE
        and recovery.score < STRAINED_RECOVERY_BELOW
    ):
        recs.append(Advisory(
            Priority.HIGH, "balance", "High Strain, Low Recovery",
            "Recent high training load with insufficient recovery. "
            "Risk of overtraining.",
            "Reduce intensity today",
        ))

    if not wellness.insufficient_data and wellness.score < WELLNESS_CHECK_BELOW:
        recs.append(Advisory(
            Priority.MEDIUM, "wellness", "Wellness Check",
            "Multiple lifestyle factors need attention for optimal health.",
            "Review sleep and activity habits",
        ))

    missing = [c.name for c in (recovery, performance, wellness) if c.insufficient_data]
    if missing:
        recs.append(Advisory(
            Priority.LOW, "data", "Insufficient Data",
            f"Not enough data to compute: {', '.join(missing)}.",
            "Sync your device or enable more metrics",
        ))

    return recs


def _history_rules(trends: TrendReport) -> list[Advisory]:
    recs: list[Advisory] = []
    avg = trends.averages

    sleep = avg.get("sleep")
    if sleep is not None and sleep < AVG_SLEEP_MIN_BELOW:
        recs.append(Advisory(
            Priority.HIGH, "sleep", "Short Sleep",
            "Your average sleep is below 7 hours. Aim for 7-9 hours for "
            "optimal recovery.",
            "Move bedtime earlier",
        ))

    steps = avg.get("steps")
    if steps is not None and steps < AVG_STEPS_BELOW:
        recs.append(Advisory(
            Priority.MEDIUM, "activity", "Low Daily Movement",
            f"You're averaging {round(steps)} steps. Try to hit 10,000 for "
            "better health outcomes.",
            "Add a daily walk",
        ))

    hrv = avg.get("hrv")
    if hrv is not None and hrv < AVG_HRV_BELOW:
        recs.append(Advisory(
            Priority.HIGH, "recovery", "Low HRV",
            "Your HRV is on the lower side. Consider lighter training and "
            "focus on stress management.",
            "Schedule lighter sessions",
        ))

    recovery = avg.get("recovery")
    if recovery is not None and recovery < AVG_RECOVERY_BELOW:
        recs.append(Advisory(
            Priority.HIGH, "training", "Sustained Low Recovery",
            "Recovery is below optimal. Consider a deload week or additional "
            "rest days.",
            "Plan a deload",
        ))

    return recs


def synthesize(
    recovery: CompositeScore,
    performance: CompositeScore,
    wellness: CompositeScore,
    strain: StrainScore,
    trends: TrendReport | None = None,
) -> tuple[Advisory, ...]:
    """Evaluate every rule and return advisories ordered by priority."""
    recs = _score_rules(recovery, performance, wellness, strain)
    if trends is not None and trends.days > 0:
        recs.extend(_history_rules(trends))
    # sorted() is stable, so rule order survives within a priority
    return tuple(sorted(recs, key=lambda a: PRIORITY_ORDER[a.priority]))


# ---------------------------------------------------------------------------
# Headline helpers
# ---------------------------------------------------------------------------


def todays_focus(
    recovery: CompositeScore,
    performance: CompositeScore,
    wellness: CompositeScore,
) -> str:
    if recovery.score < RECOVERY_DEFICIT_BELOW:
        return "Recovery"
    if performance.score >= PEAK_PERFORMANCE_AT:
        return "Performance"
    if wellness.score < WELLNESS_CHECK_BELOW:
        return "Wellness"
    return "Training"


def quick_tip(recovery: CompositeScore, performance: CompositeScore) -> str:
    if recovery.score >= 80 and performance.score >= 80:
        return "Green light for intense training today"
    if recovery.score < 50:
        return "Prioritize sleep and light activity today"
    if performance.score < 50:
        return "Focus on technique over intensity today"
    return "Listen to your body and train accordingly"
