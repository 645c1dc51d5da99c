"""
Snapshot de métricas por (empresa, ano, mês) no cache do Django.

O cálculo é sempre a fonte da verdade: o cache é read-through e é
invalidado quando transações do período mudam.

Cada período tem um contador de versão. O snapshot guarda a versão lida
antes do cálculo e só é servido enquanto ela for a atual, então um cálculo
que começou antes de um commit nunca sobrevive à invalidação desse commit.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from apps.financials.models import Transaction
from apps.reports.metrics import compute_metrics
from apps.reports.selectors import fetch_tax_configuration, fetch_transactions
from apps.reports.tax import resolve_tax_rates

logger = logging.getLogger(__name__)


def metrics_cache_key(company_id, year, month) -> str:
    return f"dashboards:metrics:{company_id}:{year}:{month}"


def metrics_version_key(company_id, year, month) -> str:
    return f"dashboards:metrics-version:{company_id}:{year}:{month}"


def _current_version(company_id, year, month) -> int:
    return cache.get(metrics_version_key(company_id, year, month), 0)


def _bump_version(company_id, year, month):
    key = metrics_version_key(company_id, year, month)
    # add é no-op quando a chave já existe; incr é atômico no Redis
    cache.add(key, 0, timeout=None)
    try:
        cache.incr(key)
    except ValueError:
        # chave expulsa entre o add e o incr
        cache.set(key, 1, timeout=None)


def compute_metrics_snapshot(company, month, year) -> dict:
    config = fetch_tax_configuration(company)
    # Alíquotas itemizadas só quando a empresa configurou; senão tabela do regime
    tax_rates = resolve_tax_rates(config) if config is not None else None
    transactions = fetch_transactions(company, month=month, year=year)
    snapshot = compute_metrics(transactions, company.tax_regime, tax_rates=tax_rates).as_dict()
    snapshot["last_calculated_at"] = timezone.now().isoformat()
    return snapshot


def _store(company, month, year, version, snapshot):
    cache.set(
        metrics_cache_key(company.pk, year, month),
        {"version": version, "snapshot": snapshot},
        settings.METRICS_CACHE_TIMEOUT,
    )


def get_or_compute_metrics(company, month, year) -> dict:
    version = _current_version(company.pk, year, month)
    entry = cache.get(metrics_cache_key(company.pk, year, month))
    if entry is not None and entry["version"] == version:
        return entry["snapshot"]
    snapshot = compute_metrics_snapshot(company, month, year)
    _store(company, month, year, version, snapshot)
    return snapshot


def refresh_metrics(company, month, year) -> dict:
    version = _current_version(company.pk, year, month)
    snapshot = compute_metrics_snapshot(company, month, year)
    _store(company, month, year, version, snapshot)
    return snapshot


def invalidate_metrics(company_id, periods):
    """Invalida, após o commit, os snapshots dos períodos (ano, mês) informados."""
    periods = sorted(set(periods))
    if not company_id or not periods:
        return

    def _invalidate():
        for year, month in periods:
            _bump_version(company_id, year, month)
        keys = [metrics_cache_key(company_id, year, month) for year, month in periods]
        cache.delete_many(keys)
        logger.debug("Cache de métricas invalidado: %s", keys)

    transaction.on_commit(_invalidate)


def invalidate_company_metrics(company_id):
    """Invalida todos os períodos com transações (mudança de alíquota, regime ou classificação)."""
    periods = (
        Transaction.objects.filter(company_id=company_id)
        .values_list("year", "month")
        .distinct()
    )
    invalidate_metrics(company_id, list(periods))
