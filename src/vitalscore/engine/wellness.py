"""Wellness score: overall health and lifestyle balance."""

from __future__ import annotations

from dataclasses import replace

from vitalscore.snapshot import MetricSnapshot
from vitalscore.engine.composite import CompositeScore, build_composite
from vitalscore.engine.factors import (
    score_activity,
    score_heart_health,
    score_nutrition_balance,
    score_stress,
    score_wellness_sleep,
)
from vitalscore.engine.grading import WELLNESS_STATUS

W_ACTIVITY = 0.25
W_SLEEP = 0.25
W_HEART = 0.20
W_STRESS = 0.15
W_NUTRITION = 0.15

INSIGHTS = (
    ("activity", 60, "Increase daily movement - aim for 10,000 steps"),
    ("sleep", 70, "Sleep quality needs improvement"),
    ("stress", 60, "Stress levels elevated - consider relaxation techniques"),
    ("heart_health", 60,
     "Cardiovascular health could improve with more aerobic activity"),
)


def score_wellness(snapshot: MetricSnapshot) -> CompositeScore:
    """Compute the Wellness composite with per-factor insights."""
    result = build_composite(
        "wellness",
        [
            (score_activity(snapshot), W_ACTIVITY),
            (score_wellness_sleep(snapshot), W_SLEEP),
            (score_heart_health(snapshot), W_HEART),
            (score_stress(snapshot), W_STRESS),
            (score_nutrition_balance(snapshot), W_NUTRITION),
        ],
        WELLNESS_STATUS,
    )
    insights = []
    for name, threshold, text in INSIGHTS:
        factor = result.factor(name)
        if factor is not None and factor.score < threshold:
            insights.append(text)
    return replace(result, recommendations=tuple(insights))
