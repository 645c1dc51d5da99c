from decimal import Decimal
from types import SimpleNamespace

import pytest

from apps.reports.goals import attach_goal_progress, goal_progress


@pytest.mark.parametrize("target", [None, 0, Decimal("0.00")])
def test_no_progress_without_target(target):
    assert goal_progress(Decimal("100"), target) is None


def test_partial_progress():
    progress = goal_progress(Decimal("2500"), Decimal("10000"))

    assert progress == {
        "target_value": Decimal("10000"),
        "current_value": Decimal("2500"),
        "progress": Decimal("25.00"),
        "achieved": False,
    }


def test_progress_is_capped_at_100():
    progress = goal_progress(Decimal("150"), Decimal("100"))

    assert progress["progress"] == Decimal("100.00")
    assert progress["achieved"] is True


def test_attach_only_matching_metrics():
    goals = [
        SimpleNamespace(metric_name="net_profit", target_value=Decimal("1000")),
        SimpleNamespace(metric_name="cac", target_value=Decimal("50")),
        SimpleNamespace(metric_name="gross_revenue", target_value=Decimal("0")),
    ]
    result = {"net_profit": Decimal("500"), "gross_revenue": Decimal("10")}

    progress = attach_goal_progress(result, goals)

    assert list(progress) == ["net_profit"]
    assert progress["net_profit"]["progress"] == Decimal("50.00")
