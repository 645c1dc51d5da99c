from datetime import date
from decimal import Decimal
from io import StringIO
from unittest import mock

import pytest
from django.core.cache import cache
from django.core.management import call_command
from django.utils import timezone
from django_celery_beat.models import PeriodicTask

from apps.clients.models import Client
from apps.companies.models import TaxConfiguration
from apps.dashboards.cache import compute_metrics_snapshot, get_or_compute_metrics, metrics_cache_key
from apps.dashboards.tasks import refresh_metrics_cache
from apps.financials.models import Category

pytestmark = pytest.mark.django_db


def test_cache_key_format(company):
    assert metrics_cache_key(company.pk, 2024, 3) == f"dashboards:metrics:{company.pk}:2024:3"


def test_new_transaction_invalidates_its_period(company, categories, create_transaction, django_capture_on_commit_callbacks):
    get_or_compute_metrics(company, 3, 2024)
    key = metrics_cache_key(company.pk, 2024, 3)
    assert cache.get(key) is not None

    with django_capture_on_commit_callbacks(execute=True):
        create_transaction("10.00", categories["revenue"], transaction_date=date(2024, 3, 2))

    assert cache.get(key) is None


def test_moving_transaction_invalidates_both_periods(company, categories, create_transaction, django_capture_on_commit_callbacks):
    transaction = create_transaction("10.00", categories["revenue"], transaction_date=date(2024, 3, 2))
    get_or_compute_metrics(company, 3, 2024)
    get_or_compute_metrics(company, 4, 2024)

    with django_capture_on_commit_callbacks(execute=True):
        transaction.transaction_date = date(2024, 4, 2)
        transaction.save()

    assert cache.get(metrics_cache_key(company.pk, 2024, 3)) is None
    assert cache.get(metrics_cache_key(company.pk, 2024, 4)) is None


def test_deleting_transaction_invalidates_period(company, categories, create_transaction, django_capture_on_commit_callbacks):
    transaction = create_transaction("10.00", categories["revenue"], transaction_date=date(2024, 3, 2))
    get_or_compute_metrics(company, 3, 2024)

    with django_capture_on_commit_callbacks(execute=True):
        transaction.delete()

    assert cache.get(metrics_cache_key(company.pk, 2024, 3)) is None


def test_other_periods_stay_cached(company, categories, create_transaction, django_capture_on_commit_callbacks):
    get_or_compute_metrics(company, 1, 2024)

    with django_capture_on_commit_callbacks(execute=True):
        create_transaction("10.00", categories["revenue"], transaction_date=date(2024, 3, 2))

    assert cache.get(metrics_cache_key(company.pk, 2024, 1)) is not None


def test_tax_configuration_change_invalidates_company_periods(company, categories, create_transaction, django_capture_on_commit_callbacks):
    create_transaction("1000.00", categories["revenue"], transaction_date=date(2024, 3, 2))
    assert get_or_compute_metrics(company, 3, 2024)["net_revenue"] == Decimal("940")

    with django_capture_on_commit_callbacks(execute=True):
        TaxConfiguration.objects.create(company=company, use_das=True, das_rate=Decimal("0.10"))

    assert get_or_compute_metrics(company, 3, 2024)["net_revenue"] == Decimal("900")


def test_category_reclassification_invalidates_company_periods(company, categories, create_transaction, django_capture_on_commit_callbacks):
    rent = categories["expense"]
    create_transaction("200.00", rent, transaction_date=date(2024, 3, 2))
    cached = get_or_compute_metrics(company, 3, 2024)
    assert cached["fixed_costs"] == Decimal("200.00")

    with django_capture_on_commit_callbacks(execute=True):
        rent.cost_classification = Category.CostClassifications.VARIABLE
        rent.save()

    metrics = get_or_compute_metrics(company, 3, 2024)
    assert metrics["fixed_costs"] == Decimal("0")
    assert metrics["variable_costs"] == Decimal("200.00")


def test_deleting_category_invalidates_detached_transactions(company, categories, create_transaction, django_capture_on_commit_callbacks):
    rent = categories["expense"]
    create_transaction("200.00", rent, transaction_date=date(2024, 3, 2))
    assert get_or_compute_metrics(company, 3, 2024)["operational_costs"] == Decimal("200.00")

    with django_capture_on_commit_callbacks(execute=True):
        rent.delete()

    assert get_or_compute_metrics(company, 3, 2024)["operational_costs"] == Decimal("0")


def test_deleting_client_invalidates_detached_transactions(company, categories, create_transaction, django_capture_on_commit_callbacks):
    client = Client.objects.create(company=company, name="Cliente Fiel")
    create_transaction("100.00", categories["revenue"], transaction_date=date(2024, 3, 2), client=client)
    create_transaction("100.00", categories["revenue"], transaction_date=date(2024, 3, 9), client=client)
    assert get_or_compute_metrics(company, 3, 2024)["total_active_clients"] == 1

    with django_capture_on_commit_callbacks(execute=True):
        client.delete()

    metrics = get_or_compute_metrics(company, 3, 2024)
    assert metrics["total_active_clients"] == 0
    assert metrics["repeat_customers_count"] == 0


def test_snapshot_computed_before_a_commit_is_not_served(company, categories, create_transaction, django_capture_on_commit_callbacks):
    stale = compute_metrics_snapshot(company, 3, 2024)

    def _compute_while_another_request_commits(*args):
        with django_capture_on_commit_callbacks(execute=True):
            create_transaction("1000.00", categories["revenue"], transaction_date=date(2024, 3, 2))
        return stale

    with mock.patch(
        "apps.dashboards.cache.compute_metrics_snapshot",
        side_effect=_compute_while_another_request_commits,
    ):
        assert get_or_compute_metrics(company, 3, 2024) == stale

    assert get_or_compute_metrics(company, 3, 2024)["total_revenue"] == Decimal("1000.00")

def test_refresh_task_warms_current_month(company):
    today = timezone.localdate()

    assert refresh_metrics_cache() == 1
    assert cache.get(metrics_cache_key(company.pk, today.year, today.month)) is not None


def test_setup_dashboard_tasks_command():
    out = StringIO()

    call_command("setup_dashboard_tasks", "--hour", "3", stdout=out)
    call_command("setup_dashboard_tasks", stdout=out)

    task = PeriodicTask.objects.get(name="Refresh Metrics Cache")
    assert task.task == "dashboards.refresh_metrics_cache"
    assert PeriodicTask.objects.filter(name="Refresh Metrics Cache").count() == 1


def test_seed_dre_categories_is_idempotent(company):
    out = StringIO()

    call_command("seed_dre_categories", str(company.id), stdout=out)
    first_count = Category.objects.filter(company=company).count()
    call_command("seed_dre_categories", str(company.id), stdout=out)

    assert Category.objects.filter(company=company).count() == first_count
    financial = Category.objects.get(company=company, name="Despesas Financeiras", parent=None)
    assert financial.is_financial
    assert Category.objects.filter(company=company, parent=financial).exists()
