"""Weighted composite primitive shared by Recovery, Performance and Wellness.

Each composite is a weighted mean over the factors that could actually be
computed.  Weights are renormalized over the present factors only, so a
missing optional metric never drags a score down; it only shifts how much
the remaining factors count.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Iterable

from vitalscore.engine.factors import FactorResult
from vitalscore.engine.grading import (
    NO_DATA_STATUS,
    StatusBand,
    TrainingZone,
    classify,
    grade,
)


@dataclass(frozen=True)
class CompositeScore:
    """A 0-100 composite with its grade, status and contributing factors."""

    name: str
    score: int
    grade: str
    status: str
    message: str  # the status band's advisory line
    factors: tuple[FactorResult, ...]
    recommendations: tuple[str, ...] = ()
    insufficient_data: bool = False
    training_zone: TrainingZone | None = None

    def factor(self, name: str) -> FactorResult | None:
        """Look up a contributing factor by name."""
        for f in self.factors:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> dict[str, Any]:
        d = {
            "name": self.name,
            "score": self.score,
            "grade": self.grade,
            "status": self.status,
            "message": self.message,
            "insufficient_data": self.insufficient_data,
            "factors": [f.to_dict() for f in self.factors],
            "recommendations": list(self.recommendations),
        }
        if self.training_zone is not None:
            d["training_zone"] = self.training_zone.to_dict()
        return d

    def __repr__(self) -> str:
        if self.insufficient_data:
            return f"CompositeScore({self.name}: no data)"
        return (
            f"CompositeScore({self.name}={self.score} {self.grade}, "
            f"{self.status}, factors={len(self.factors)})"
        )


def weighted_composite(
    pairs: Iterable[tuple[FactorResult | None, float]],
) -> tuple[int, tuple[FactorResult, ...]]:
    """Combine ``(factor, weight)`` pairs into a rounded 0-100 score.

    Absent factors (``None``) are skipped and the remaining weights are
    renormalized to sum to 1.  Returns the score together with the present
    factors, each stamped with the weight it contributed.  When nothing is
    present the score is 0 and the factor tuple is empty; callers must treat
    that as "no data", not as a real zero.
    """
    present: list[FactorResult] = []
    total = 0.0
    weight_sum = 0.0
    for factor, weight in pairs:
        if factor is None:
            continue
        present.append(replace(factor, weight=weight))
        total += factor.score * weight
        weight_sum += weight

    if weight_sum <= 0:
        return 0, ()

    # half-up rounding
    score = math.floor(total / weight_sum + 0.5)
    return int(max(0, min(100, score))), tuple(present)


def build_composite(
    name: str,
    pairs: Iterable[tuple[FactorResult | None, float]],
    status_bands: tuple,
) -> CompositeScore:
    """Score, grade and classify one composite.

    Composite-specific extras (recommendations, training zone) are layered
    on afterwards with :func:`dataclasses.replace`.
    """
    score, factors = weighted_composite(pairs)
    if not factors:
        return CompositeScore(
            name=name,
            score=0,
            grade=grade(0),
            status=NO_DATA_STATUS.level,
            message=NO_DATA_STATUS.message,
            factors=(),
            insufficient_data=True,
        )

    band: StatusBand = classify(score, status_bands)
    return CompositeScore(
        name=name,
        score=score,
        grade=grade(score),
        status=band.level,
        message=band.message,
        factors=factors,
    )
