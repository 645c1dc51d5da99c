from dataclasses import asdict
from decimal import Decimal

import pytest

from apps.reports.aggregation import PeriodTotals
from apps.reports.dre import build_dre, compute_dre
from apps.reports.tax import DEFAULT_TAX_RATES, TaxRates, compute_net_revenue


def _flatten(data, prefix=""):
    for key, value in data.items():
        if isinstance(value, dict):
            yield from _flatten(value, f"{prefix}{key}.")
        elif value is not None:
            yield f"{prefix}{key}", value


def test_itemized_waterfall_with_default_rates():
    totals = PeriodTotals(
        gross_revenue=Decimal("100000"),
        cost_of_goods=Decimal("30000"),
        operating_expenses=Decimal("20000"),
    )

    result = build_dre(totals, DEFAULT_TAX_RATES)

    assert result.deductions_total == Decimal("42250")
    assert result.das == Decimal("0")
    assert result.net_revenue == Decimal("57750")
    assert result.gross_profit == Decimal("27750")
    assert result.operating_profit == Decimal("7750")
    assert result.pre_tax_profit == Decimal("7750")
    assert result.irpj == Decimal("1162.5")
    assert result.irpj_surtax == Decimal("0")
    assert result.csll == Decimal("697.5")
    assert result.income_tax_total == Decimal("1860")
    assert result.net_profit == Decimal("5890")


def test_margins_and_vertical_analysis_are_rounded_percentages():
    totals = PeriodTotals(
        gross_revenue=Decimal("100000"),
        cost_of_goods=Decimal("30000"),
        operating_expenses=Decimal("20000"),
    )

    result = build_dre(totals, DEFAULT_TAX_RATES)

    assert result.gross_margin == Decimal("48.05")
    assert result.operating_margin == Decimal("13.42")
    assert result.net_margin == Decimal("10.20")
    assert result.vertical_analysis.deductions == Decimal("73.16")
    assert result.vertical_analysis.cost_of_goods == Decimal("51.95")
    assert result.vertical_analysis.operating_expenses == Decimal("34.63")
    assert result.vertical_analysis.income_tax == Decimal("3.22")
    assert result.vertical_analysis.financial_expenses == Decimal("0")


def test_zero_revenue_produces_only_zeros():
    result = build_dre(PeriodTotals(), DEFAULT_TAX_RATES)

    for key, value in _flatten(result.as_dict()):
        assert value == 0, key


def test_surtax_applies_above_threshold():
    # Sem receita: LAIR vem só da receita financeira e as margens ficam zeradas
    result = build_dre(PeriodTotals(financial_revenue=Decimal("25000")), DEFAULT_TAX_RATES)

    assert result.pre_tax_profit == Decimal("25000")
    assert result.irpj == Decimal("3750")
    assert result.irpj_surtax == Decimal("500")
    assert result.csll == Decimal("2250")
    assert result.net_profit == Decimal("18500")
    assert result.net_margin == Decimal("0")


def test_custom_threshold_and_surtax_rate():
    rates = TaxRates(
        irpj_additional_threshold=Decimal("10000"),
        irpj_additional_rate=Decimal("0.05"),
    )

    result = build_dre(PeriodTotals(financial_revenue=Decimal("25000")), rates)

    assert result.irpj_surtax == Decimal("750")


@pytest.mark.parametrize("operating_expenses", [Decimal("57750"), Decimal("70000")])
def test_no_income_tax_without_positive_pre_tax_profit(operating_expenses):
    totals = PeriodTotals(gross_revenue=Decimal("100000"), operating_expenses=operating_expenses)

    result = build_dre(totals, DEFAULT_TAX_RATES)

    assert result.pre_tax_profit <= 0
    assert result.irpj == result.irpj_surtax == result.csll == Decimal("0")
    assert result.income_tax_total == Decimal("0")
    assert result.net_profit == result.pre_tax_profit


def test_das_mode_uses_single_deduction_path():
    rates = TaxRates(use_das=True)
    totals = PeriodTotals(gross_revenue=Decimal("100000"))

    result = build_dre(totals, rates)

    assert result.das == Decimal("6000")
    assert result.icms == result.ipi == result.pis == result.cofins == result.iss == Decimal("0")
    assert result.deductions_total == result.das
    assert result.net_revenue == Decimal("94000")


@pytest.mark.parametrize(
    "totals",
    [
        PeriodTotals(gross_revenue=Decimal("5000"), cost_of_goods=Decimal("9000")),
        PeriodTotals(gross_revenue=Decimal("80000"), financial_expenses=Decimal("1200.55")),
        PeriodTotals(financial_revenue=Decimal("300"), operating_expenses=Decimal("100")),
    ],
)
def test_net_profit_identity(totals):
    result = build_dre(totals, DEFAULT_TAX_RATES)

    assert result.net_profit == result.pre_tax_profit - result.income_tax_total
    assert result.operating_profit + totals.financial_revenue - totals.financial_expenses == result.pre_tax_profit


def test_negative_net_revenue_guards_percentages():
    rates = TaxRates(icms_rate=Decimal("1.5"))

    result = build_dre(PeriodTotals(gross_revenue=Decimal("1000")), rates)

    assert result.net_revenue < 0
    assert result.gross_margin == result.net_margin == Decimal("0")
    assert result.vertical_analysis.deductions == Decimal("0")


def test_compute_dre_from_transactions(make_category, make_transaction):
    transactions = [
        make_transaction("10000.00", make_category("revenue", "Vendas")),
        make_transaction("2000.00", make_category("cost", "Mercadorias")),
        make_transaction("1500.00", make_category("expense", "Aluguel")),
        make_transaction("500.00", make_category("expense", "Despesas Financeiras")),
    ]

    result = compute_dre(transactions, TaxRates(use_das=True))

    assert result.gross_revenue == Decimal("10000.00")
    assert result.net_revenue == Decimal("9400")
    assert result.operating_profit == Decimal("5900")
    assert result.financial_expenses == Decimal("500.00")
    assert result.pre_tax_profit == Decimal("5400")
    assert result.horizontal_analysis is None


def test_compute_dre_is_idempotent(make_category, make_transaction):
    transactions = [
        make_transaction("1234.56", make_category("revenue", "Vendas")),
        make_transaction("333.33", make_category("cost", "Insumos")),
    ]

    first = compute_dre(transactions, DEFAULT_TAX_RATES)
    second = compute_dre(transactions, DEFAULT_TAX_RATES)

    assert first == second
    assert asdict(first) == asdict(second)


def test_output_never_contains_non_finite_values(make_category, make_transaction):
    result = compute_dre(
        [make_transaction("0.00", make_category("revenue"))],
        DEFAULT_TAX_RATES,
        previous_transactions=[],
    )

    for key, value in _flatten(result.as_dict()):
        assert Decimal(value).is_finite(), key


@pytest.mark.parametrize("rates", [DEFAULT_TAX_RATES, TaxRates(use_das=True, das_rate=Decimal("0.045"))])
def test_net_revenue_matches_shared_net_revenue(rates):
    gross = Decimal("12345.67")

    result = build_dre(PeriodTotals(gross_revenue=gross), rates)

    assert result.net_revenue == compute_net_revenue(gross, tax_rates=rates)
    assert result.net_revenue == gross - result.deductions_total
