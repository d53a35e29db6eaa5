"""Recovery score computation (HRV-driven).

Recovery is a renormalized weighted mean of six factors: HRV, resting
heart rate, sleep duration, sleep quality, breathing rate and SpO2.
"""

from __future__ import annotations

from dataclasses import replace

from vitalscore.snapshot import MetricSnapshot
from vitalscore.engine.composite import CompositeScore, build_composite
from vitalscore.engine.factors import (
    score_breathing_rate,
    score_hrv,
    score_resting_hr,
    score_sleep_duration,
    score_sleep_quality,
    score_spo2,
)
from vitalscore.engine.grading import RECOVERY_STATUS

# Weights for the composite recovery score
W_HRV = 0.30
W_RHR = 0.20
W_SLEEP_DURATION = 0.20
W_SLEEP_QUALITY = 0.15
W_BREATHING = 0.10
W_SPO2 = 0.05

# Per-factor advisories: (factor, sub-score below which it fires, text)
FACTOR_ADVISORIES = (
    ("hrv", 60, "HRV is below optimal - focus on stress management and sleep quality"),
    ("sleep_duration", 70, "Increase sleep duration to 7-9 hours for better recovery"),
    ("resting_hr", 60, "Elevated resting heart rate detected - consider a recovery day"),
)
SPO2_CONCERN_ADVISORY = (
    "Blood oxygen averaged below 90% - consider checking with a medical professional"
)
EXCELLENT_ADVISORY = "Recovery is excellent - you are cleared for intense training"
ADEQUATE_ADVISORY = "Recovery is adequate - listen to your body during training"
NO_DATA_ADVISORY = "Sync HRV, resting heart rate or sleep data to get a recovery score"


def _recommendations(result: CompositeScore) -> tuple[str, ...]:
    if result.insufficient_data:
        return (NO_DATA_ADVISORY,)

    recs = []
    for name, threshold, text in FACTOR_ADVISORIES:
        factor = result.factor(name)
        if factor is not None and factor.score < threshold:
            recs.append(text)

    spo2 = result.factor("spo2")
    if spo2 is not None and spo2.concern:
        recs.append(SPO2_CONCERN_ADVISORY)

    if not recs:
        recs.append(EXCELLENT_ADVISORY if result.score >= 80 else ADEQUATE_ADVISORY)
    return tuple(recs)


def score_recovery(snapshot: MetricSnapshot) -> CompositeScore:
    """Compute the Recovery composite for one snapshot."""
    result = build_composite(
        "recovery",
        [
            (score_hrv(snapshot), W_HRV),
            (score_resting_hr(snapshot), W_RHR),
            (score_sleep_duration(snapshot), W_SLEEP_DURATION),
            (score_sleep_quality(snapshot), W_SLEEP_QUALITY),
            (score_breathing_rate(snapshot), W_BREATHING),
            (score_spo2(snapshot), W_SPO2),
        ],
        RECOVERY_STATUS,
    )
    return replace(result, recommendations=_recommendations(result))
