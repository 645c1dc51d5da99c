from datetime import date
from decimal import Decimal

import pytest

from apps.reports.aggregation import PeriodTotals
from apps.reports.dre import WATERFALL_LINES, build_dre, compare_with_previous, compute_dre, previous_period
from apps.reports.tax import TaxRates

RATES = TaxRates(use_das=True)


@pytest.mark.parametrize(
    "month, year, expected",
    [
        (1, 2024, (12, 2023)),
        (2, 2024, (1, 2024)),
        (12, 2024, (11, 2024)),
    ],
)
def test_previous_period(month, year, expected):
    assert previous_period(month, year) == expected


def test_variation_against_previous_period():
    current = build_dre(PeriodTotals(gross_revenue=Decimal("1500")), RATES)
    previous = build_dre(PeriodTotals(gross_revenue=Decimal("1000")), RATES)

    analysis = compare_with_previous(current, previous)

    assert analysis.gross_revenue == Decimal("50.00")
    assert analysis.net_revenue == Decimal("50.00")
    assert analysis.cost_of_goods == Decimal("0")


def test_decrease_is_negative_variation():
    current = build_dre(PeriodTotals(gross_revenue=Decimal("750")), RATES)
    previous = build_dre(PeriodTotals(gross_revenue=Decimal("1000")), RATES)

    assert compare_with_previous(current, previous).gross_revenue == Decimal("-25.00")


def test_non_positive_previous_values_yield_zero_variation():
    current = build_dre(PeriodTotals(gross_revenue=Decimal("1000")), RATES)
    previous = build_dre(PeriodTotals(operating_expenses=Decimal("200")), RATES)

    analysis = compare_with_previous(current, previous)

    # operating_profit anterior é negativo, gross_revenue anterior é zero
    assert analysis.operating_profit == Decimal("0")
    assert analysis.gross_revenue == Decimal("0")


def test_empty_previous_period_reports_all_zero(make_category, make_transaction):
    transactions = [make_transaction("900.00", make_category("revenue"), transaction_date=date(2024, 1, 5))]

    result = compute_dre(transactions, RATES, previous_transactions=[])

    assert result.horizontal_analysis is not None
    for line in WATERFALL_LINES:
        assert getattr(result.horizontal_analysis, line) == Decimal("0"), line


def test_previous_period_is_computed_independently(make_category, make_transaction):
    revenue = make_category("revenue")
    current = [make_transaction("2000.00", revenue), make_transaction("500.00", make_category("cost"))]
    previous = [make_transaction("1000.00", revenue)]

    result = compute_dre(current, RATES, previous_transactions=previous)

    assert result.horizontal_analysis.gross_revenue == Decimal("100.00")
    assert result.horizontal_analysis.cost_of_goods == Decimal("0")
    assert result.gross_revenue == Decimal("2000.00")
