"""
Leituras usadas pelo motor de cálculo. Todas escopadas pela empresa.

Falhas de banco viram DataFetchError (sem retry); o cálculo é abortado.
"""
import logging

from django.db import DatabaseError
from django.db.models import Q

from apps.companies.models import TaxConfiguration
from apps.financials.models import Goal, Transaction

from .exceptions import DataFetchError

logger = logging.getLogger(__name__)


def fetch_transactions(
    company,
    *,
    month=None,
    year=None,
    category_id=None,
    client_id=None,
    date_from=None,
    date_to=None,
):
    try:
        queryset = Transaction.objects.filter(company=company).select_related("category")
        queryset = _apply_filters(
            queryset,
            month=month,
            year=year,
            category_id=category_id,
            client_id=client_id,
            date_from=date_from,
            date_to=date_to,
        )
        return list(queryset.order_by("transaction_date", "created_at"))
    except DatabaseError as exc:
        logger.error("Erro ao buscar transações da empresa %s: %s", company.pk, exc)
        raise DataFetchError() from exc


def _apply_filters(queryset, *, month, year, category_id, client_id, date_from, date_to):
    if month:
        queryset = queryset.filter(month=month)
    if year:
        queryset = queryset.filter(year=year)
    if category_id:
        # Categoria pai inclui os lançamentos das subcategorias
        queryset = queryset.filter(Q(category_id=category_id) | Q(category__parent_id=category_id))
    if client_id:
        queryset = queryset.filter(client_id=client_id)
    if date_from:
        queryset = queryset.filter(transaction_date__gte=date_from)
    if date_to:
        queryset = queryset.filter(transaction_date__lte=date_to)
    return queryset


def fetch_tax_configuration(company):
    """Configuração tributária da empresa ou None (ausência não é erro)."""
    try:
        return TaxConfiguration.objects.filter(company=company).first()
    except DatabaseError as exc:
        logger.error("Erro ao buscar configuração tributária da empresa %s: %s", company.pk, exc)
        raise DataFetchError() from exc


def fetch_goals(company, month, year):
    try:
        return list(Goal.objects.filter(company=company, period_month=month, period_year=year))
    except DatabaseError as exc:
        logger.error("Erro ao buscar metas da empresa %s: %s", company.pk, exc)
        raise DataFetchError() from exc
