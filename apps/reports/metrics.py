"""
Métricas de unidade econômica (CAC, LTV, ponto de equilíbrio, margem de contribuição).

Todas as divisões têm guarda: denominador zero resulta em 0, exceto a
frequência média de compra, cujo padrão é 1 para o LTV não zerar.
"""
import logging
from collections import Counter
from dataclasses import asdict, dataclass
from decimal import Decimal

from apps.financials.models import Category

from .aggregation import transaction_amount
from .tax import compute_net_revenue
from .utils import HUNDRED, ZERO, round_money, round_percent, safe_percent, safe_ratio

logger = logging.getLogger(__name__)

LIFETIME_CEILING_MONTHS = Decimal("12")
DEFAULT_RETENTION_MULTIPLIER = Decimal("0.5")
DEFAULT_PURCHASE_FREQUENCY = Decimal("1")


@dataclass(frozen=True)
class MetricsResult:
    total_revenue: Decimal
    net_revenue: Decimal
    total_sales_count: int
    new_clients_count: int
    total_active_clients: int
    repeat_customers_count: int
    marketing_costs: Decimal
    sales_costs: Decimal
    operational_costs: Decimal
    fixed_costs: Decimal
    variable_costs: Decimal
    cac: Decimal
    ltv: Decimal
    ltv_cac_ratio: Decimal
    roi: Decimal
    average_ticket: Decimal
    retention_rate: Decimal
    avg_purchase_frequency: Decimal
    avg_lifetime_months: Decimal
    break_even_point: Decimal
    safety_margin: Decimal
    safety_margin_percent: Decimal
    contribution_margin: Decimal
    contribution_margin_percent: Decimal

    def as_dict(self):
        return asdict(self)


def compute_metrics(transactions, tax_regime, tax_rates=None) -> MetricsResult:
    """
    tax_rates (TaxRates) só deve ser informado quando a empresa tem alíquotas
    próprias; sem ele a receita líquida usa a tabela simplificada do regime.
    """
    total_revenue = ZERO
    marketing_costs = ZERO
    sales_costs = ZERO
    operational_costs = ZERO
    fixed_costs = ZERO
    variable_costs = ZERO
    total_sales_count = 0
    new_clients_count = 0
    client_purchases = Counter()

    for transaction in transactions:
        amount = transaction_amount(transaction)
        category = transaction.category
        if category is None:
            continue
        category_type = category.category_type

        if category_type == Category.CategoryTypes.REVENUE:
            if category.nature == Category.Natures.FINANCIAL:
                continue
            total_revenue += amount
            total_sales_count += 1
            if transaction.client_id:
                client_purchases[transaction.client_id] += 1
            if transaction.is_new_client:
                new_clients_count += 1
            continue

        # custos e despesas
        if transaction.is_marketing_cost:
            marketing_costs += amount
        if transaction.is_sales_cost:
            sales_costs += amount

        if category.cost_classification == Category.CostClassifications.FIXED:
            fixed_costs += amount
        elif category.cost_classification == Category.CostClassifications.VARIABLE:
            variable_costs += amount

        if category_type == Category.CategoryTypes.EXPENSE:
            operational_costs += amount

    net_revenue = compute_net_revenue(total_revenue, tax_rates=tax_rates, tax_regime=tax_regime)

    acquisition_costs = marketing_costs + sales_costs
    cac = safe_ratio(acquisition_costs, Decimal(new_clients_count))
    average_ticket = safe_ratio(total_revenue, Decimal(total_sales_count))

    total_active_clients = len(client_purchases)
    repeat_customers_count = sum(1 for count in client_purchases.values() if count > 1)
    retention_rate = safe_ratio(Decimal(repeat_customers_count), Decimal(total_active_clients))
    avg_purchase_frequency = safe_ratio(
        Decimal(total_sales_count),
        Decimal(total_active_clients),
        default=DEFAULT_PURCHASE_FREQUENCY,
    )
    avg_lifetime_months = LIFETIME_CEILING_MONTHS * (
        retention_rate if retention_rate > 0 else DEFAULT_RETENTION_MULTIPLIER
    )
    ltv = average_ticket * avg_purchase_frequency * avg_lifetime_months
    ltv_cac_ratio = safe_ratio(ltv, cac)

    contribution_margin = net_revenue - variable_costs
    contribution_margin_rate = safe_ratio(contribution_margin, net_revenue)
    break_even_point = safe_ratio(fixed_costs, contribution_margin_rate)
    safety_margin = net_revenue - break_even_point

    total_costs = fixed_costs + variable_costs + marketing_costs + sales_costs
    roi = safe_percent(net_revenue - total_costs, total_costs)

    logger.debug(
        "Métricas: receita=%s vendas=%s novos_clientes=%s custos=%s",
        total_revenue,
        total_sales_count,
        new_clients_count,
        total_costs,
    )

    return MetricsResult(
        total_revenue=total_revenue,
        net_revenue=net_revenue,
        total_sales_count=total_sales_count,
        new_clients_count=new_clients_count,
        total_active_clients=total_active_clients,
        repeat_customers_count=repeat_customers_count,
        marketing_costs=marketing_costs,
        sales_costs=sales_costs,
        operational_costs=operational_costs,
        fixed_costs=fixed_costs,
        variable_costs=variable_costs,
        cac=round_money(cac),
        ltv=round_money(ltv),
        ltv_cac_ratio=round_percent(ltv_cac_ratio),
        roi=roi,
        average_ticket=round_money(average_ticket),
        retention_rate=round_percent(retention_rate),
        avg_purchase_frequency=round_percent(avg_purchase_frequency),
        avg_lifetime_months=round_percent(avg_lifetime_months),
        break_even_point=round_money(break_even_point),
        safety_margin=round_money(safety_margin),
        safety_margin_percent=safe_percent(safety_margin, net_revenue),
        contribution_margin=round_money(contribution_margin),
        contribution_margin_percent=round_percent(contribution_margin_rate * HUNDRED),
    )
