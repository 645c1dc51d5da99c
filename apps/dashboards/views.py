from django.utils import timezone
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.financials.mixins import ActiveCompanyMixin
from apps.financials.permissions import IsCompanyOwner
from apps.reports.goals import attach_goal_progress
from apps.reports.history import compute_metrics_series, trailing_window_start
from apps.reports.selectors import fetch_goals, fetch_tax_configuration, fetch_transactions
from apps.reports.tax import resolve_tax_rates
from apps.reports.views import MONTH_NAMES_PT, _parse_month_year, _parse_months

from .cache import get_or_compute_metrics

METRICS_HISTORY_DEFAULT_MONTHS = 6


class MetricsView(ActiveCompanyMixin, APIView):
    """
    Métricas de unidade econômica do mês (CAC, LTV, ROI, ponto de equilíbrio...).
    Lidas do cache; recalculadas quando o snapshot não existe.
    """

    permission_classes = [permissions.IsAuthenticated, IsCompanyOwner]

    def get(self, request):
        company = self.get_active_company()
        month, year = _parse_month_year(request)

        metrics = get_or_compute_metrics(company, month, year)
        goals = attach_goal_progress(metrics, fetch_goals(company, month, year))

        return Response({
            "currency": "BRL",
            "year": year,
            "month": month,
            "month_name": MONTH_NAMES_PT.get(month, ""),
            "tax_regime": company.tax_regime,
            "metrics": metrics,
            "goals": goals,
        })


class MetricsHistoryView(ActiveCompanyMixin, APIView):
    """Evolução de CAC, LTV e LTV/CAC nos últimos N meses (padrão 6)."""

    permission_classes = [permissions.IsAuthenticated, IsCompanyOwner]

    def get(self, request):
        company = self.get_active_company()
        months = _parse_months(request, METRICS_HISTORY_DEFAULT_MONTHS)
        date_from = trailing_window_start(timezone.localdate(), months)

        config = fetch_tax_configuration(company)
        tax_rates = resolve_tax_rates(config) if config is not None else None
        transactions = fetch_transactions(company, date_from=date_from)

        return Response({
            "months": months,
            "date_from": date_from.isoformat(),
            "series": compute_metrics_series(transactions, company.tax_regime, tax_rates=tax_rates),
        })
