from datetime import date

import pytest
from django.core.exceptions import ValidationError

from apps.clients.models import Client
from apps.financials.models import Category, Transaction


@pytest.mark.django_db
def test_transaction_period_is_derived_from_date(create_transaction, categories):
    transaction = create_transaction("10.00", categories["revenue"], transaction_date=date(2024, 11, 30))

    assert (transaction.month, transaction.year) == (11, 2024)

    transaction.transaction_date = date(2025, 1, 2)
    transaction.save(update_fields=["transaction_date"])
    transaction.refresh_from_db()

    assert (transaction.month, transaction.year) == (1, 2025)


@pytest.mark.django_db
def test_expense_nature_is_prefilled_from_name(categories):
    assert categories["financial_expense"].nature == Category.Natures.FINANCIAL
    assert categories["expense"].nature == Category.Natures.OPERATIONAL
    assert categories["revenue"].nature is None


@pytest.mark.django_db
def test_category_parent_must_share_type_and_company(company, other_company, categories):
    with pytest.raises(ValidationError):
        Category.objects.create(
            company=company,
            parent=categories["revenue"],
            name="Subcusto",
            category_type=Category.CategoryTypes.COST,
        )

    foreign_parent = Category.objects.create(
        company=other_company, name="Vendas", category_type=Category.CategoryTypes.REVENUE
    )
    with pytest.raises(ValidationError):
        Category.objects.create(
            company=company,
            parent=foreign_parent,
            name="Serviços",
            category_type=Category.CategoryTypes.REVENUE,
        )


@pytest.mark.django_db
def test_only_one_level_of_nesting(company, categories):
    child = Category.objects.create(
        company=company,
        parent=categories["revenue"],
        name="Produtos",
        category_type=Category.CategoryTypes.REVENUE,
    )

    with pytest.raises(ValidationError):
        Category.objects.create(
            company=company,
            parent=child,
            name="Eletrônicos",
            category_type=Category.CategoryTypes.REVENUE,
        )


@pytest.mark.django_db
def test_revenue_category_rejects_cost_classification(company):
    with pytest.raises(ValidationError):
        Category.objects.create(
            company=company,
            name="Vendas",
            category_type=Category.CategoryTypes.REVENUE,
            cost_classification=Category.CostClassifications.FIXED,
        )


@pytest.mark.django_db
def test_transaction_rejects_records_of_other_company(create_transaction, other_company, company):
    foreign_client = Client.objects.create(company=other_company, name="Cliente Externo")

    with pytest.raises(ValidationError):
        create_transaction("10.00", client=foreign_client)


@pytest.mark.django_db
def test_transaction_rejects_negative_amount(company):
    with pytest.raises(ValidationError):
        Transaction.objects.create(
            company=company,
            description="Estorno",
            amount="-1.00",
            transaction_date=date(2024, 3, 1),
        )


@pytest.mark.django_db
def test_deleting_category_keeps_transactions(create_transaction, categories):
    transaction = create_transaction("10.00", categories["cost"])

    categories["cost"].delete()
    transaction.refresh_from_db()

    assert transaction.category is None
