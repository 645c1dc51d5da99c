import logging
import uuid

from django.conf import settings
from django.utils import timezone
from rest_framework import permissions
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.financials.mixins import ActiveCompanyMixin
from apps.financials.permissions import IsCompanyOwner

from .dre import compute_dre, previous_period
from .goals import attach_goal_progress
from .history import compute_historical_series, trailing_window_start
from .selectors import fetch_goals, fetch_tax_configuration, fetch_transactions
from .tax import resolve_tax_rates

logger = logging.getLogger(__name__)

MAX_HISTORY_MONTHS = 60

MONTH_NAMES_PT = {
    1: "janeiro",
    2: "fevereiro",
    3: "março",
    4: "abril",
    5: "maio",
    6: "junho",
    7: "julho",
    8: "agosto",
    9: "setembro",
    10: "outubro",
    11: "novembro",
    12: "dezembro",
}


def _parse_month_year(request):
    """Resolve month/year from query params, defaulting to the current month/year."""
    today = timezone.localdate()
    month = request.query_params.get("month") or today.month
    year = request.query_params.get("year") or today.year
    try:
        month = int(month)
        year = int(year)
    except (TypeError, ValueError) as exc:
        raise ValidationError("month e year devem ser inteiros.") from exc
    if month < 1 or month > 12:
        raise ValidationError("month deve estar entre 1 e 12.")
    return month, year


def _parse_months(request, default):
    raw = request.query_params.get("months") or default
    try:
        months = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError("months deve ser um inteiro.") from exc
    if months < 1 or months > MAX_HISTORY_MONTHS:
        raise ValidationError(f"months deve estar entre 1 e {MAX_HISTORY_MONTHS}.")
    return months


def _parse_uuid_param(request, name):
    raw = request.query_params.get(name)
    if not raw:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError as exc:
        raise ValidationError({name: "Identificador inválido."}) from exc


def _parse_bool_param(request, name, default=True):
    raw = request.query_params.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


class DREReportView(ActiveCompanyMixin, APIView):
    """
    Demonstrativo de Resultado do Exercício (DRE) de um mês.

    Estrutura:
    - (+) Receita Bruta
    - (-) Deduções (DAS ou ICMS/IPI/PIS/COFINS/ISS)
    - (=) Receita Líquida
    - (-) Custos (CMV)
    - (=) Lucro Bruto
    - (-) Despesas Operacionais
    - (=) Lucro Operacional
    - (+/-) Receitas e Despesas Financeiras
    - (=) LAIR
    - (-) IRPJ, adicional de IRPJ e CSLL
    - (=) Lucro Líquido

    compare=false desliga a análise horizontal contra o mês anterior.
    """

    permission_classes = [permissions.IsAuthenticated, IsCompanyOwner]

    def get(self, request):
        company = self.get_active_company()
        month, year = _parse_month_year(request)
        category_id = _parse_uuid_param(request, "category_id")
        client_id = _parse_uuid_param(request, "client_id")
        compare = _parse_bool_param(request, "compare")

        filters = {"category_id": category_id, "client_id": client_id}
        tax_rates = resolve_tax_rates(fetch_tax_configuration(company))
        transactions = fetch_transactions(company, month=month, year=year, **filters)

        previous_transactions = None
        previous_month, previous_year = previous_period(month, year)
        if compare:
            previous_transactions = fetch_transactions(
                company, month=previous_month, year=previous_year, **filters
            )

        result = compute_dre(transactions, tax_rates, previous_transactions=previous_transactions)
        data = result.as_dict()
        goals = attach_goal_progress(data, fetch_goals(company, month, year))

        return Response({
            "currency": "BRL",
            "year": year,
            "month": month,
            "month_name": MONTH_NAMES_PT.get(month, ""),
            "previous_period": {"month": previous_month, "year": previous_year} if compare else None,
            "filters": {
                "category_id": str(category_id) if category_id else None,
                "client_id": str(client_id) if client_id else None,
            },
            "transactions_count": len(transactions),
            "tax_rates": tax_rates.as_dict(),
            "dre": data,
            "goals": goals,
        })


class HistoricalDREView(ActiveCompanyMixin, APIView):
    """Lucro líquido, margem líquida e receita líquida dos últimos N meses."""

    permission_classes = [permissions.IsAuthenticated, IsCompanyOwner]

    def get(self, request):
        company = self.get_active_company()
        months = _parse_months(request, settings.DRE_HISTORY_DEFAULT_MONTHS)
        date_from = trailing_window_start(timezone.localdate(), months)

        tax_rates = resolve_tax_rates(fetch_tax_configuration(company))
        transactions = fetch_transactions(company, date_from=date_from)

        return Response({
            "currency": "BRL",
            "months": months,
            "date_from": date_from.isoformat(),
            "series": compute_historical_series(transactions, tax_rates),
        })
