import logging
from dataclasses import asdict, dataclass
from decimal import Decimal

from apps.financials.models import Category, Transaction

from .exceptions import CalculationError
from .utils import ZERO, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodTotals:
    gross_revenue: Decimal = ZERO
    cost_of_goods: Decimal = ZERO
    operating_expenses: Decimal = ZERO
    financial_expenses: Decimal = ZERO
    financial_revenue: Decimal = ZERO
    # Parte de gross_revenue vinda de lançamentos operacionais sem categoria
    uncategorized_revenue: Decimal = ZERO

    def as_dict(self):
        return asdict(self)


def transaction_amount(transaction) -> Decimal:
    amount = to_decimal(transaction.amount, field="amount")
    if amount < 0:
        raise CalculationError(f"amount negativo na transação {transaction.pk}: {amount}")
    return amount


def aggregate_transactions(transactions) -> PeriodTotals:
    """
    Soma os valores das transações nos baldes do DRE.

    Precedência por transação:
    1. receita -> gross_revenue (natureza financeira -> financial_revenue)
    2. custo -> cost_of_goods
    3. despesa -> financial_expenses se a categoria é financeira, senão operating_expenses
    4. sem categoria e operacional -> gross_revenue (também em uncategorized_revenue)
    5. demais casos são ignorados
    """
    gross_revenue = ZERO
    cost_of_goods = ZERO
    operating_expenses = ZERO
    financial_expenses = ZERO
    financial_revenue = ZERO
    uncategorized_revenue = ZERO

    for transaction in transactions:
        amount = transaction_amount(transaction)
        category = transaction.category

        if category is not None:
            category_type = category.category_type
            if category_type == Category.CategoryTypes.REVENUE:
                if category.nature == Category.Natures.FINANCIAL:
                    financial_revenue += amount
                else:
                    gross_revenue += amount
            elif category_type == Category.CategoryTypes.COST:
                cost_of_goods += amount
            elif category_type == Category.CategoryTypes.EXPENSE:
                if category.is_financial:
                    financial_expenses += amount
                else:
                    operating_expenses += amount
        elif transaction.transaction_type == Transaction.TransactionTypes.OPERATIONAL:
            gross_revenue += amount
            uncategorized_revenue += amount

    if uncategorized_revenue:
        logger.warning(
            "Receita sem categoria somada à receita bruta: %s", uncategorized_revenue
        )

    totals = PeriodTotals(
        gross_revenue=gross_revenue,
        cost_of_goods=cost_of_goods,
        operating_expenses=operating_expenses,
        financial_expenses=financial_expenses,
        financial_revenue=financial_revenue,
        uncategorized_revenue=uncategorized_revenue,
    )
    logger.debug("Totais agregados: %s", totals)
    return totals
