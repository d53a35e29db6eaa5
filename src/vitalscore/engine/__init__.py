"""Scoring engine turning daily wearable snapshots into readiness metrics.

Modules:
    factors         -- Per-metric band tables and 0-100 factor scorers
    composite       -- Weighted composite with renormalization over present factors
    grading         -- Letter grades, status bands and training zones
    recovery        -- Recovery composite (HRV, RHR, sleep, breathing, SpO2)
    performance     -- Performance Readiness composite
    wellness        -- Wellness composite
    strain          -- Additive 0-21 strain score
    trends          -- Early/late window trends, averages and deload assessment
    recommendations -- Prioritized advisories and training clearance
    report          -- Intelligence report builder
"""

from vitalscore.engine.factors import Band, FactorResult, band_score
from vitalscore.engine.composite import (
    CompositeScore,
    build_composite,
    weighted_composite,
)
from vitalscore.engine.grading import StatusBand, TrainingZone, grade, training_zone
from vitalscore.engine.recovery import score_recovery
from vitalscore.engine.performance import score_performance
from vitalscore.engine.wellness import score_wellness
from vitalscore.engine.strain import score_strain, StrainScore
from vitalscore.engine.trends import (
    analyze_trends,
    assess_deload,
    metric_trend,
    DeloadAdvice,
    TrendDirection,
    TrendReport,
)
from vitalscore.engine.recommendations import (
    synthesize,
    training_clearance,
    Advisory,
    Priority,
    TrainingClearance,
)
from vitalscore.engine.report import build_report, IntelligenceReport, OverallScore

__all__ = [
    # factors
    "Band",
    "FactorResult",
    "band_score",
    # composite
    "CompositeScore",
    "build_composite",
    "weighted_composite",
    # grading
    "StatusBand",
    "TrainingZone",
    "grade",
    "training_zone",
    # composites
    "score_recovery",
    "score_performance",
    "score_wellness",
    # strain
    "score_strain",
    "StrainScore",
    # trends
    "analyze_trends",
    "assess_deload",
    "metric_trend",
    "DeloadAdvice",
    "TrendDirection",
    "TrendReport",
    # recommendations
    "synthesize",
    "training_clearance",
    "Advisory",
    "Priority",
    "TrainingClearance",
    # report
    "build_report",
    "IntelligenceReport",
    "OverallScore",
]
