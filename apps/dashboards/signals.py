from django.db.models.signals import post_delete, post_save, pre_delete, pre_save
from django.dispatch import receiver

from apps.clients.models import Client
from apps.companies.models import Company, TaxConfiguration
from apps.financials.models import Category, Transaction

from .cache import invalidate_company_metrics, invalidate_metrics


def _period(date):
    return (date.year, date.month)


@receiver(pre_save, sender=Transaction)
def metrics_cache_pre_save(sender, instance: Transaction, **kwargs):
    if instance._state.adding:
        return
    try:
        previous = Transaction.objects.only("transaction_date", "company_id").get(pk=instance.pk)
    except Transaction.DoesNotExist:
        return
    instance._metrics_cache_previous = {
        "company_id": previous.company_id,
        "date": previous.transaction_date,
    }


@receiver(post_save, sender=Transaction)
def metrics_cache_post_save(sender, instance: Transaction, created: bool, **kwargs):
    if not created:
        # Mudança de data move a transação de período: invalida o antigo também
        previous = getattr(instance, "_metrics_cache_previous", None)
        if previous and previous["date"]:
            invalidate_metrics(previous["company_id"], [_period(previous["date"])])
    if instance.transaction_date:
        invalidate_metrics(instance.company_id, [_period(instance.transaction_date)])


@receiver(post_delete, sender=Transaction)
def metrics_cache_post_delete(sender, instance: Transaction, **kwargs):
    if instance.transaction_date:
        invalidate_metrics(instance.company_id, [_period(instance.transaction_date)])


@receiver(post_save, sender=TaxConfiguration)
def metrics_cache_tax_configuration(sender, instance: TaxConfiguration, **kwargs):
    invalidate_company_metrics(instance.company_id)


@receiver(post_save, sender=Company)
def metrics_cache_company(sender, instance: Company, created: bool, **kwargs):
    if not created:
        invalidate_company_metrics(instance.pk)


@receiver(post_save, sender=Category)
def metrics_cache_category(sender, instance: Category, created: bool, **kwargs):
    # Categoria nova ainda não tem lançamentos
    if not created:
        invalidate_company_metrics(instance.company_id)


@receiver(pre_delete, sender=Category)
@receiver(pre_delete, sender=Client)
def metrics_cache_detached_transactions(sender, instance, **kwargs):
    # SET_NULL nas transações é um update em massa, sem signals de Transaction
    invalidate_company_metrics(instance.company_id)
