import logging
from decimal import Decimal

import pytest

from apps.financials.models import Category, Transaction
from apps.reports.aggregation import aggregate_transactions
from apps.reports.exceptions import CalculationError


def test_routes_amounts_by_category_type(make_category, make_transaction):
    revenue = make_category("revenue", "Vendas")
    cost = make_category("cost", "Mercadorias")
    expense = make_category("expense", "Aluguel")

    totals = aggregate_transactions([
        make_transaction("1000.00", revenue),
        make_transaction("250.50", revenue),
        make_transaction("300.00", cost),
        make_transaction("120.00", expense),
    ])

    assert totals.gross_revenue == Decimal("1250.50")
    assert totals.cost_of_goods == Decimal("300.00")
    assert totals.operating_expenses == Decimal("120.00")
    assert totals.financial_expenses == Decimal("0")
    assert totals.financial_revenue == Decimal("0")


def test_financial_expense_detected_by_name(make_category, make_transaction):
    category = make_category("expense", "Despesas Financeiras")

    totals = aggregate_transactions([make_transaction("80.00", category)])

    assert totals.financial_expenses == Decimal("80.00")
    assert totals.operating_expenses == Decimal("0")


def test_name_match_is_case_insensitive(make_category, make_transaction):
    category = make_category("expense", "JUROS E TARIFA FINANCEIRA")

    totals = aggregate_transactions([make_transaction("10.00", category)])

    assert totals.financial_expenses == Decimal("10.00")


def test_explicit_nature_wins_over_name(make_category, make_transaction):
    operational = make_category(
        "expense", "Assessoria Financeira", nature=Category.Natures.OPERATIONAL
    )
    financial = make_category("expense", "Juros", nature=Category.Natures.FINANCIAL)

    totals = aggregate_transactions([
        make_transaction("100.00", operational),
        make_transaction("40.00", financial),
    ])

    assert totals.operating_expenses == Decimal("100.00")
    assert totals.financial_expenses == Decimal("40.00")


def test_financial_revenue_category(make_category, make_transaction):
    category = make_category("revenue", "Rendimentos", nature=Category.Natures.FINANCIAL)

    totals = aggregate_transactions([make_transaction("55.00", category)])

    assert totals.financial_revenue == Decimal("55.00")
    assert totals.gross_revenue == Decimal("0")


def test_uncategorized_operational_falls_back_to_revenue(make_transaction, caplog):
    with caplog.at_level(logging.WARNING, logger="apps.reports.aggregation"):
        totals = aggregate_transactions([make_transaction("70.00")])

    assert totals.gross_revenue == Decimal("70.00")
    assert totals.uncategorized_revenue == Decimal("70.00")
    assert "sem categoria" in caplog.text


def test_uncategorized_administrative_is_ignored(make_transaction):
    totals = aggregate_transactions([
        make_transaction("70.00", transaction_type=Transaction.TransactionTypes.ADMINISTRATIVE)
    ])

    assert totals.gross_revenue == Decimal("0")
    assert totals.uncategorized_revenue == Decimal("0")


def test_empty_input_yields_zero_totals():
    totals = aggregate_transactions([])

    assert all(value == 0 for value in totals.as_dict().values())


@pytest.mark.parametrize("amount", [Decimal("-1.00"), Decimal("NaN"), Decimal("Infinity")])
def test_malformed_amounts_raise(make_category, make_transaction, amount):
    with pytest.raises(CalculationError):
        aggregate_transactions([make_transaction(amount, make_category("revenue"))])
