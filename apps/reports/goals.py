from .utils import HUNDRED, round_percent, to_decimal

# Chaves numéricas dos resultados de DRE e métricas que aceitam meta
GOAL_METRICS = frozenset({
    "gross_revenue",
    "net_revenue",
    "gross_profit",
    "operating_profit",
    "pre_tax_profit",
    "net_profit",
    "gross_margin",
    "operating_margin",
    "net_margin",
    "total_revenue",
    "total_sales_count",
    "new_clients_count",
    "cac",
    "ltv",
    "ltv_cac_ratio",
    "roi",
    "average_ticket",
    "break_even_point",
    "contribution_margin",
    "safety_margin",
})


def goal_progress(current_value, target_value):
    """
    Progresso em direção a uma meta. None quando não há meta ou ela é zero.
    """
    if target_value is None:
        return None
    target = to_decimal(target_value, field="target_value")
    if target == 0:
        return None
    current = to_decimal(current_value, field="current_value")
    progress = min(current / target * HUNDRED, HUNDRED)
    return {
        "target_value": target,
        "current_value": current,
        "progress": round_percent(progress),
        "achieved": current >= target,
    }


def attach_goal_progress(result: dict, goals) -> dict:
    """Mapeia metric_name -> progresso para as metas cujas métricas existem no resultado."""
    progress = {}
    for goal in goals:
        if goal.metric_name not in result:
            continue
        entry = goal_progress(result[goal.metric_name], goal.target_value)
        if entry is not None:
            progress[goal.metric_name] = entry
    return progress
