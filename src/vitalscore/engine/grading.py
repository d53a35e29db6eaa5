"""Letter grades and qualitative status bands for composite scores.

The bands are enumerated per composite, each with its one-line advisory,
rather than derived from a formula.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any


@dataclass(frozen=True)
class StatusBand:
    """A qualitative label for a score range plus its advisory line."""

    level: str
    message: str


@dataclass(frozen=True)
class TrainingZone:
    """Intensity zone derived from Performance Readiness."""

    zone: str  # green / yellow / orange / red
    intensity: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# (minimum score, grade), highest first
GRADE_BANDS = (
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
    (45, "D+"),
    (40, "D"),
)
FAILING_GRADE = "F"

RECOVERY_STATUS = (
    (80, StatusBand("optimal", "Fully recovered and ready for high intensity")),
    (60, StatusBand("good", "Well recovered, moderate-high intensity OK")),
    (40, StatusBand("moderate", "Partial recovery, consider lighter training")),
    (20, StatusBand("low", "Under-recovered, prioritize rest")),
    (0, StatusBand("critical", "Significant recovery deficit, rest recommended")),
)

PERFORMANCE_STATUS = (
    (80, StatusBand(
        "peak",
        "Peak performance day - ideal for PRs, competitions, or high-intensity sessions",
    )),
    (60, StatusBand(
        "ready", "Good performance potential - standard training is appropriate"
    )),
    (40, StatusBand(
        "reduced", "Reduced capacity - focus on technique and moderate loads"
    )),
    (0, StatusBand("low", "Low readiness - prioritize recovery activities")),
)

WELLNESS_STATUS = (
    (80, StatusBand("thriving", "Excellent overall wellness")),
    (60, StatusBand("balanced", "Good lifestyle balance")),
    (40, StatusBand("attention", "Some areas need attention")),
    (0, StatusBand("concern", "Multiple wellness factors need improvement")),
)

OVERALL_STATUS = (
    (80, StatusBand("optimal", "All systems go")),
    (60, StatusBand("good", "Performing well")),
    (40, StatusBand("moderate", "Room for improvement")),
    (0, StatusBand("low", "Needs attention")),
)

TRAINING_ZONES = (
    (80, TrainingZone("green", "high", "All training types cleared")),
    (60, TrainingZone("yellow", "moderate", "Moderate intensity recommended")),
    (40, TrainingZone("orange", "light", "Light activity or technique work")),
    (0, TrainingZone("red", "rest", "Active recovery or rest day")),
)

# Used in place of a status band when a composite had no usable inputs.
NO_DATA_STATUS = StatusBand("no-data", "Not enough data to compute this score")


def grade(score: float) -> str:
    """Map a 0-100 score onto a letter grade."""
    for minimum, letter in GRADE_BANDS:
        if score >= minimum:
            return letter
    return FAILING_GRADE


def classify(score: float, bands: tuple) -> Any:
    """Return the entry of the first band whose minimum *score* reaches.

    Bands are ``(minimum, value)`` pairs ordered highest first; the last
    band catches everything below.
    """
    for minimum, value in bands:
        if score >= minimum:
            return value
    return bands[-1][1]


def training_zone(score: float) -> TrainingZone:
    return classify(score, TRAINING_ZONES)
