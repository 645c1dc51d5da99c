import calendar
from collections import defaultdict
from datetime import date

from .aggregation import aggregate_transactions
from .dre import build_dre
from .metrics import compute_metrics

MONTH_LABELS_PT = ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez")


def trailing_window_start(today: date, months: int) -> date:
    """today - N meses, com o dia limitado ao tamanho do mês de destino."""
    total = today.year * 12 + (today.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def group_by_period(transactions) -> dict:
    """Agrupa por (ano, mês) em ordem cronológica. Meses sem transações não aparecem."""
    groups = defaultdict(list)
    for transaction in transactions:
        tx_date = transaction.transaction_date
        groups[(tx_date.year, tx_date.month)].append(transaction)
    return dict(sorted(groups.items()))


def compute_historical_series(transactions, tax_rates) -> list[dict]:
    series = []
    for (year, month), period_transactions in group_by_period(transactions).items():
        result = build_dre(aggregate_transactions(period_transactions), tax_rates)
        series.append({
            "month": MONTH_LABELS_PT[month - 1],
            "month_num": month,
            "year": year,
            "net_profit": result.net_profit,
            "net_margin": result.net_margin,
            "net_revenue": result.net_revenue,
        })
    return series


def compute_metrics_series(transactions, tax_regime, tax_rates=None) -> list[dict]:
    """Evolução mensal de CAC, LTV e LTV/CAC."""
    series = []
    for (year, month), period_transactions in group_by_period(transactions).items():
        result = compute_metrics(period_transactions, tax_regime, tax_rates=tax_rates)
        series.append({
            "month": MONTH_LABELS_PT[month - 1],
            "month_num": month,
            "year": year,
            "cac": result.cac,
            "ltv": result.ltv,
            "ltv_cac_ratio": result.ltv_cac_ratio,
        })
    return series
