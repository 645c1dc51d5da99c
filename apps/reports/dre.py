"""
Cálculo do DRE (Demonstração do Resultado do Exercício).

Cascata: receita bruta -> deduções -> receita líquida -> lucro bruto ->
lucro operacional -> LAIR -> IRPJ/adicional/CSLL -> lucro líquido, com
margens e análise vertical sobre a receita líquida.
"""
import logging
from dataclasses import asdict, dataclass, replace
from decimal import Decimal
from typing import Optional

from .aggregation import PeriodTotals, aggregate_transactions
from .tax import TaxRates, compute_net_revenue, compute_sales_deductions
from .utils import HUNDRED, ZERO, round_percent, safe_percent

logger = logging.getLogger(__name__)

# Linhas da cascata comparadas na análise horizontal
WATERFALL_LINES = (
    "gross_revenue",
    "deductions_total",
    "net_revenue",
    "cost_of_goods",
    "gross_profit",
    "operating_expenses",
    "operating_profit",
    "financial_expenses",
    "financial_revenue",
    "pre_tax_profit",
    "income_tax_total",
    "net_profit",
)


@dataclass(frozen=True)
class VerticalAnalysis:
    deductions: Decimal = ZERO
    cost_of_goods: Decimal = ZERO
    operating_expenses: Decimal = ZERO
    financial_expenses: Decimal = ZERO
    financial_revenue: Decimal = ZERO
    income_tax: Decimal = ZERO


@dataclass(frozen=True)
class HorizontalAnalysis:
    gross_revenue: Decimal = ZERO
    deductions_total: Decimal = ZERO
    net_revenue: Decimal = ZERO
    cost_of_goods: Decimal = ZERO
    gross_profit: Decimal = ZERO
    operating_expenses: Decimal = ZERO
    operating_profit: Decimal = ZERO
    financial_expenses: Decimal = ZERO
    financial_revenue: Decimal = ZERO
    pre_tax_profit: Decimal = ZERO
    income_tax_total: Decimal = ZERO
    net_profit: Decimal = ZERO


@dataclass(frozen=True)
class DREResult:
    gross_revenue: Decimal
    icms: Decimal
    ipi: Decimal
    pis: Decimal
    cofins: Decimal
    iss: Decimal
    das: Decimal
    deductions_total: Decimal
    net_revenue: Decimal
    cost_of_goods: Decimal
    gross_profit: Decimal
    operating_expenses: Decimal
    operating_profit: Decimal
    financial_expenses: Decimal
    financial_revenue: Decimal
    pre_tax_profit: Decimal
    irpj: Decimal
    irpj_surtax: Decimal
    csll: Decimal
    income_tax_total: Decimal
    net_profit: Decimal
    gross_margin: Decimal
    operating_margin: Decimal
    net_margin: Decimal
    vertical_analysis: VerticalAnalysis
    uncategorized_revenue: Decimal = ZERO
    horizontal_analysis: Optional[HorizontalAnalysis] = None

    def as_dict(self):
        return asdict(self)


def previous_period(month: int, year: int) -> tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year


def _variation(current: Decimal, previous: Decimal) -> Decimal:
    if previous <= 0:
        return round_percent(ZERO)
    return round_percent((current - previous) / previous * HUNDRED)


def compare_with_previous(current: DREResult, previous: DREResult) -> HorizontalAnalysis:
    """Variação percentual de cada linha da cascata contra o período anterior."""
    return HorizontalAnalysis(
        **{
            line: _variation(getattr(current, line), getattr(previous, line))
            for line in WATERFALL_LINES
        }
    )


def build_dre(totals: PeriodTotals, tax_rates: TaxRates, previous: Optional[DREResult] = None) -> DREResult:
    gross_revenue = totals.gross_revenue

    deductions = compute_sales_deductions(gross_revenue, tax_rates)
    deductions_total = deductions.total
    net_revenue = compute_net_revenue(gross_revenue, tax_rates=tax_rates)

    gross_profit = net_revenue - totals.cost_of_goods
    operating_profit = gross_profit - totals.operating_expenses
    pre_tax_profit = operating_profit + totals.financial_revenue - totals.financial_expenses

    # IRPJ/CSLL só incidem sobre LAIR positivo
    if pre_tax_profit > 0:
        irpj = pre_tax_profit * tax_rates.irpj_rate
        irpj_surtax = (
            max(ZERO, pre_tax_profit - tax_rates.irpj_additional_threshold)
            * tax_rates.irpj_additional_rate
        )
        csll = pre_tax_profit * tax_rates.csll_rate
    else:
        irpj = irpj_surtax = csll = ZERO
    income_tax_total = irpj + irpj_surtax + csll
    net_profit = pre_tax_profit - income_tax_total

    vertical = VerticalAnalysis(
        deductions=safe_percent(deductions_total, net_revenue),
        cost_of_goods=safe_percent(totals.cost_of_goods, net_revenue),
        operating_expenses=safe_percent(totals.operating_expenses, net_revenue),
        financial_expenses=safe_percent(totals.financial_expenses, net_revenue),
        financial_revenue=safe_percent(totals.financial_revenue, net_revenue),
        income_tax=safe_percent(income_tax_total, net_revenue),
    )

    result = DREResult(
        gross_revenue=gross_revenue,
        icms=deductions.icms,
        ipi=deductions.ipi,
        pis=deductions.pis,
        cofins=deductions.cofins,
        iss=deductions.iss,
        das=deductions.das,
        deductions_total=deductions_total,
        net_revenue=net_revenue,
        cost_of_goods=totals.cost_of_goods,
        gross_profit=gross_profit,
        operating_expenses=totals.operating_expenses,
        operating_profit=operating_profit,
        financial_expenses=totals.financial_expenses,
        financial_revenue=totals.financial_revenue,
        pre_tax_profit=pre_tax_profit,
        irpj=irpj,
        irpj_surtax=irpj_surtax,
        csll=csll,
        income_tax_total=income_tax_total,
        net_profit=net_profit,
        gross_margin=safe_percent(gross_profit, net_revenue),
        operating_margin=safe_percent(operating_profit, net_revenue),
        net_margin=safe_percent(net_profit, net_revenue),
        vertical_analysis=vertical,
        uncategorized_revenue=totals.uncategorized_revenue,
    )
    if previous is not None:
        return replace(result, horizontal_analysis=compare_with_previous(result, previous))
    return result


def compute_dre(transactions, tax_rates: TaxRates, previous_transactions=None) -> DREResult:
    """
    DRE de um conjunto de transações. Quando previous_transactions é informado,
    o período anterior é agregado e calculado de forma independente e a
    análise horizontal é anexada ao resultado.
    """
    previous = None
    if previous_transactions is not None:
        previous = build_dre(aggregate_transactions(previous_transactions), tax_rates)
    return build_dre(aggregate_transactions(transactions), tax_rates, previous=previous)
