"""Tests for vitalscore.engine.recommendations."""

import pytest

from tests.conftest import make_composite, make_strain
from vitalscore.engine.recommendations import (
    FULL_CLEARANCE,
    MODERATE_CLEARANCE,
    RESTRICTED_CLEARANCE,
    Priority,
    quick_tip,
    synthesize,
    todays_focus,
    training_clearance,
)
from vitalscore.engine.trends import TrendReport


def _composites(recovery=75, performance=75, wellness=75):
    return (
        make_composite("recovery", recovery),
        make_composite("performance", performance),
        make_composite("wellness", wellness),
    )


def _titles(advisories):
    return [a.title for a in advisories]


def _trends(**averages):
    return TrendReport(days=7, start="2026-02-07", end="2026-02-13", averages=averages)


class TestTrainingClearance:
    def test_full(self):
        clearance = training_clearance(*_composites(85, 85)[:2])
        assert clearance is FULL_CLEARANCE
        assert "heavy compound lifts" in clearance.cleared
        assert "heavy compound lifts" not in clearance.avoid

    def test_restricted(self):
        clearance = training_clearance(*_composites(30, 30)[:2])
        assert clearance is RESTRICTED_CLEARANCE
        assert "heavy compound lifts" in clearance.avoid
        assert "heavy compound lifts" not in clearance.cleared

    @pytest.mark.parametrize("recovery,performance", [(70, 69), (55, 20), (20, 50)])
    def test_moderate(self, recovery, performance):
        clearance = training_clearance(*_composites(recovery, performance)[:2])
        assert clearance is MODERATE_CLEARANCE
        assert "PR attempts" in clearance.avoid

    def test_tiers_never_overlap(self):
        for tier in (FULL_CLEARANCE, MODERATE_CLEARANCE, RESTRICTED_CLEARANCE):
            assert not set(tier.cleared) & set(tier.avoid)

    def test_to_dict(self):
        assert RESTRICTED_CLEARANCE.to_dict()["tier"] == "restricted"


class TestSynthesize:
    def test_quiet_day(self):
        assert synthesize(*_composites(), make_strain(8.0)) == ()

    def test_recovery_deficit(self):
        recs = synthesize(*_composites(recovery=40), make_strain(5.0))
        assert _titles(recs) == ["Recovery Deficit"]
        assert recs[0].priority == Priority.HIGH

    def test_peak_day(self):
        recs = synthesize(*_composites(recovery=90, performance=85), make_strain(5.0))
        assert _titles(recs) == ["Peak Day"]

    def test_high_strain_low_recovery(self):
        recs = synthesize(*_composites(recovery=55), make_strain(16.0))
        assert _titles(recs) == ["High Strain, Low Recovery"]

    def test_strain_boundary(self):
        recs = synthesize(*_composites(recovery=55), make_strain(15.0))
        assert recs == ()

    def test_multiple_rules_fire(self):
        recs = synthesize(*_composites(recovery=30, wellness=50), make_strain(18.0))
        assert _titles(recs) == [
            "Recovery Deficit", "High Strain, Low Recovery", "Wellness Check",
        ]

    def test_ordered_by_priority(self):
        recs = synthesize(
            *_composites(wellness=50), make_strain(5.0),
            trends=_trends(sleep=400.0, steps=6000.0),
        )
        assert [a.priority for a in recs] == [
            Priority.HIGH, Priority.MEDIUM, Priority.MEDIUM,
        ]
        assert _titles(recs) == ["Short Sleep", "Wellness Check", "Low Daily Movement"]

    def test_insufficient_data(self):
        recovery = make_composite("recovery", 0, insufficient_data=True)
        performance = make_composite("performance", 0, insufficient_data=True)
        wellness = make_composite("wellness", 0, insufficient_data=True)
        recs = synthesize(recovery, performance, wellness, make_strain(18.0))
        assert _titles(recs) == ["Insufficient Data"]
        assert recs[0].priority == Priority.LOW
        assert "recovery, performance, wellness" in recs[0].message

    def test_partial_insufficient(self):
        wellness = make_composite("wellness", 0, insufficient_data=True)
        recs = synthesize(
            make_composite("recovery", 45), make_composite("performance", 60),
            wellness, make_strain(5.0),
        )
        assert _titles(recs) == ["Recovery Deficit", "Insufficient Data"]
        assert recs[-1].message == "Not enough data to compute: wellness."


class TestHistoryRules:
    def test_all_history_rules(self):
        recs = synthesize(
            *_composites(), make_strain(5.0),
            trends=_trends(sleep=380.0, steps=4200.0, hrv=32.0, recovery=45.0),
        )
        assert _titles(recs) == [
            "Short Sleep", "Low HRV", "Sustained Low Recovery", "Low Daily Movement",
        ]
        assert "4200 steps" in recs[-1].message

    def test_healthy_averages(self):
        recs = synthesize(
            *_composites(), make_strain(5.0),
            trends=_trends(sleep=470.0, steps=11000.0, hrv=65.0, recovery=80.0),
        )
        assert recs == ()

    def test_missing_averages_skipped(self):
        recs = synthesize(
            *_composites(), make_strain(5.0),
            trends=_trends(sleep=None, steps=None, hrv=None, recovery=None),
        )
        assert recs == ()

    def test_empty_window_ignored(self):
        trends = TrendReport(days=0, start=None, end=None, averages={"steps": 0.0})
        assert synthesize(*_composites(), make_strain(5.0), trends=trends) == ()

    def test_to_dict(self):
        recs = synthesize(*_composites(recovery=40), make_strain(5.0))
        d = recs[0].to_dict()
        assert d["priority"] == "high"
        assert d["title"] == "Recovery Deficit"


class TestHeadlines:
    @pytest.mark.parametrize("scores,focus", [
        ((40, 90, 90), "Recovery"),
        ((70, 85, 50), "Performance"),
        ((70, 70, 50), "Wellness"),
        ((70, 70, 70), "Training"),
    ])
    def test_focus(self, scores, focus):
        assert todays_focus(*_composites(*scores)) == focus

    @pytest.mark.parametrize("recovery,performance,fragment", [
        (85, 85, "Green light"),
        (40, 85, "Prioritize sleep"),
        (60, 40, "technique"),
        (65, 65, "Listen to your body"),
    ])
    def test_quick_tip(self, recovery, performance, fragment):
        recovery_c, performance_c, _ = _composites(recovery, performance)
        assert fragment in quick_tip(recovery_c, performance_c)
