"""Performance Readiness: how ready is the body for hard training today?

Readiness leans on a previously computed Recovery score (40%) and adds
training load, sleep debt and muscle readiness.  Which Recovery is passed
in is the caller's decision: :func:`vitalscore.engine.report.build_report`
uses the same day's Recovery unless a prior-day score is supplied.
"""

from __future__ import annotations

from dataclasses import replace

from vitalscore.snapshot import MetricSnapshot
from vitalscore.engine.composite import CompositeScore, build_composite
from vitalscore.engine.factors import (
    SLEEP_BASELINE_HOURS,
    FactorResult,
    score_muscle_readiness,
    score_sleep_debt,
    score_training_load,
)
from vitalscore.engine.grading import PERFORMANCE_STATUS, training_zone

W_RECOVERY = 0.40
W_TRAINING_LOAD = 0.25
W_SLEEP_DEBT = 0.20
W_MUSCLE_READINESS = 0.15


def recovery_factor(
    recovery: CompositeScore | int | float | None,
    name: str = "recovery",
) -> FactorResult | None:
    """Turn a Recovery result (or a bare score) into a readiness factor.

    A Recovery composite flagged as insufficient contributes nothing.
    """
    if recovery is None:
        return None
    if isinstance(recovery, CompositeScore):
        if recovery.insufficient_data:
            return None
        value = recovery.score
    else:
        value = recovery
    value = max(0.0, min(100.0, float(value)))
    return FactorResult(name, value, value)


def score_performance(
    snapshot: MetricSnapshot,
    recovery: CompositeScore | int | float | None,
    sleep_baseline_hours: float = SLEEP_BASELINE_HOURS,
    prior_day: bool = False,
) -> CompositeScore:
    """Compute Performance Readiness.

    Args:
        snapshot: Today's metrics.
        recovery: The Recovery result or score this readiness builds on,
            either today's or yesterday's.
        sleep_baseline_hours: Nightly sleep target for the sleep-debt factor.
        prior_day: Label the recovery factor "prior_recovery" when
            *recovery* comes from the previous day.

    Returns:
        CompositeScore carrying the training zone and readiness advice.
    """
    result = build_composite(
        "performance",
        [
            (recovery_factor(recovery, "prior_recovery" if prior_day else "recovery"),
             W_RECOVERY),
            (score_training_load(snapshot), W_TRAINING_LOAD),
            (score_sleep_debt(snapshot, sleep_baseline_hours), W_SLEEP_DEBT),
            (score_muscle_readiness(snapshot), W_MUSCLE_READINESS),
        ],
        PERFORMANCE_STATUS,
    )
    if result.insufficient_data:
        return result
    return replace(
        result,
        recommendations=(result.message,),
        training_zone=training_zone(result.score),
    )
