"""Intelligence report builder.

Runs every scorer for one snapshot (plus optional history) and bundles the
results into a single immutable, JSON-serializable report.  Only the
``generated_at`` and ``duration_ms`` fields depend on the clock; everything
else is a pure function of the inputs.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Sequence

from vitalscore.snapshot import MetricSnapshot, validate_snapshot
from vitalscore.engine.composite import CompositeScore
from vitalscore.engine.factors import SLEEP_BASELINE_HOURS
from vitalscore.engine.grading import OVERALL_STATUS, StatusBand, classify, grade
from vitalscore.engine.performance import score_performance
from vitalscore.engine.recommendations import (
    Advisory,
    TrainingClearance,
    quick_tip,
    synthesize,
    todays_focus,
    training_clearance,
)
from vitalscore.engine.recovery import score_recovery
from vitalscore.engine.strain import StrainScore, score_strain
from vitalscore.engine.trends import (
    DEFAULT_THRESHOLD_PCT,
    DeloadAdvice,
    TrendReport,
    analyze_trends,
    assess_deload,
)
from vitalscore.engine.wellness import score_wellness

logger = logging.getLogger(__name__)

# Fixed blend, not renormalized
W_OVERALL_RECOVERY = 0.35
W_OVERALL_PERFORMANCE = 0.30
W_OVERALL_WELLNESS = 0.35


@dataclass(frozen=True)
class OverallScore:
    """Blend of the three composites."""

    score: int
    grade: str
    status: str
    message: str
    complete: bool  # False if any composite had no data

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "grade": self.grade,
            "status": self.status,
            "message": self.message,
            "complete": self.complete,
        }


@dataclass(frozen=True)
class IntelligenceReport:
    """Everything the engine knows about one subject's day."""

    generated_at: str  # ISO timestamp
    duration_ms: float
    subject_id: str
    source: str
    day: str  # ISO date
    overall: OverallScore
    recovery: CompositeScore
    performance: CompositeScore
    wellness: CompositeScore
    strain: StrainScore
    recommendations: tuple[Advisory, ...]
    training: TrainingClearance
    focus: str
    quick_tip: str
    trends: TrendReport | None = None
    deload: DeloadAdvice | None = None

    def to_dict(self, include_timing: bool = True) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly).

        With ``include_timing=False`` the clock-dependent fields are left
        out, so two reports for the same inputs compare equal.
        """
        d: dict[str, Any] = {}
        if include_timing:
            d["generated_at"] = self.generated_at
            d["duration_ms"] = self.duration_ms
        d.update({
            "subject_id": self.subject_id,
            "source": self.source,
            "day": self.day,
            "overall": self.overall.to_dict(),
            "recovery": self.recovery.to_dict(),
            "performance": self.performance.to_dict(),
            "wellness": self.wellness.to_dict(),
            "strain": self.strain.to_dict(),
            "recommendations": [a.to_dict() for a in self.recommendations],
            "training": self.training.to_dict(),
            "focus": self.focus,
            "quick_tip": self.quick_tip,
            "trends": self.trends.to_dict() if self.trends else None,
            "deload": self.deload.to_dict() if self.deload else None,
        })
        return d

    def to_json(self, indent: int = 2, include_timing: bool = True) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(include_timing), indent=indent, allow_nan=False)

    def __repr__(self) -> str:
        return (
            f"IntelligenceReport({self.subject_id} {self.day}: "
            f"overall={self.overall.score}, "
            f"recovery={self.recovery.score}, "
            f"performance={self.performance.score}, "
            f"wellness={self.wellness.score}, "
            f"strain={self.strain.score:.1f}/21)"
        )


def overall_score(
    recovery: CompositeScore,
    performance: CompositeScore,
    wellness: CompositeScore,
) -> OverallScore:
    raw = (
        recovery.score * W_OVERALL_RECOVERY
        + performance.score * W_OVERALL_PERFORMANCE
        + wellness.score * W_OVERALL_WELLNESS
    )
    score = int(raw + 0.5)
    band: StatusBand = classify(score, OVERALL_STATUS)
    complete = not any(
        c.insufficient_data for c in (recovery, performance, wellness)
    )
    return OverallScore(
        score=score,
        grade=grade(score),
        status=band.level,
        message=band.message,
        complete=complete,
    )


def _trend_window(
    snapshot: MetricSnapshot,
    history: Sequence[MetricSnapshot],
) -> list[MetricSnapshot]:
    """History plus today, one entry per day, oldest first."""
    window = [s for s in history if s.day != snapshot.day]
    window.append(snapshot)
    window.sort(key=lambda s: s.day)
    return window


def build_report(
    snapshot: MetricSnapshot,
    history: Sequence[MetricSnapshot] | None = None,
    prior_recovery: CompositeScore | int | float | None = None,
    sleep_baseline_hours: float = SLEEP_BASELINE_HOURS,
    threshold_pct: float = DEFAULT_THRESHOLD_PCT,
) -> IntelligenceReport:
    """Run the full engine on one snapshot.

    Args:
        snapshot: Today's validated metrics.
        history: Optional prior snapshots for the same subject.  When given,
            trends are computed over history plus today and a deload
            assessment is attached.
        prior_recovery: Recovery to feed Performance Readiness.  Defaults to
            today's Recovery; pass yesterday's result (or score) for
            next-day readiness.
        sleep_baseline_hours: Nightly sleep target for the sleep-debt factor.
        threshold_pct: Percent change a trend needs to leave "stable".

    Returns:
        A freshly built IntelligenceReport.

    Raises:
        InvalidSnapshotError: If the snapshot has no subject id or date.
    """
    validate_snapshot(snapshot)
    started = time.perf_counter()
    generated_at = datetime.now(timezone.utc).isoformat()

    recovery = score_recovery(snapshot)
    readiness_input = recovery if prior_recovery is None else prior_recovery
    performance = score_performance(
        snapshot, readiness_input, sleep_baseline_hours,
        prior_day=prior_recovery is not None,
    )
    wellness = score_wellness(snapshot)
    strain = score_strain(snapshot)
    overall = overall_score(recovery, performance, wellness)

    for composite in (recovery, performance, wellness):
        if composite.insufficient_data:
            logger.warning(
                "%s %s: no usable inputs for %s",
                snapshot.subject_id, snapshot.day, composite.name,
            )

    trends = None
    deload = None
    if history is not None:
        window = _trend_window(snapshot, history)
        trends = analyze_trends(window, threshold_pct)
        deload = assess_deload(window)

    recommendations = synthesize(recovery, performance, wellness, strain, trends)
    clearance = training_clearance(recovery, performance)

    duration_ms = round((time.perf_counter() - started) * 1000.0, 3)
    logger.debug(
        "%s %s: recovery=%d performance=%d wellness=%d strain=%.1f (%.3f ms)",
        snapshot.subject_id, snapshot.day, recovery.score, performance.score,
        wellness.score, strain.score, duration_ms,
    )

    return IntelligenceReport(
        generated_at=generated_at,
        duration_ms=duration_ms,
        subject_id=snapshot.subject_id,
        source=snapshot.source,
        day=snapshot.day.isoformat(),
        overall=overall,
        recovery=recovery,
        performance=performance,
        wellness=wellness,
        strain=strain,
        recommendations=recommendations,
        training=clearance,
        focus=todays_focus(recovery, performance, wellness),
        quick_tip=quick_tip(recovery, performance),
        trends=trends,
        deload=deload,
    )
