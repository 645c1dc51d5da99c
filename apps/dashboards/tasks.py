import logging

from celery import shared_task
from django.utils import timezone

from apps.companies.models import Company

from .cache import refresh_metrics

logger = logging.getLogger(__name__)


@shared_task(name='dashboards.refresh_metrics_cache')
def refresh_metrics_cache() -> int:
    """Recalcula o snapshot de métricas do mês corrente de todas as empresas."""
    today = timezone.localdate()
    refreshed = 0
    for company in Company.objects.all().iterator():
        refresh_metrics(company, today.month, today.year)
        refreshed += 1
    logger.info("Snapshots de métricas atualizados: %s empresa(s)", refreshed)
    return refreshed
