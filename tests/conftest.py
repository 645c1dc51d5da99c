from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from apps.companies.models import Company
from apps.financials.models import Category, Transaction
from apps.users.models import User


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_category():
    """Categoria não salva, para testes do motor sem banco."""

    def _make(category_type, name="Categoria", cost_classification=None, nature=None):
        return Category(
            name=name,
            category_type=category_type,
            cost_classification=cost_classification,
            nature=nature,
        )

    return _make


@pytest.fixture
def make_transaction():
    def _make(amount, category=None, transaction_date=date(2024, 3, 10), **extra):
        extra.setdefault("transaction_type", Transaction.TransactionTypes.OPERATIONAL)
        return Transaction(
            description="Lançamento",
            amount=Decimal(str(amount)) if not isinstance(amount, Decimal) else amount,
            category=category,
            transaction_date=transaction_date,
            **extra,
        )

    return _make


@pytest.fixture
def user(db):
    return User.objects.create_user(
        "dono@example.com", "Ana Souza", password="senha-forte-123"
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        "outro@example.com", "Bruno Lima", password="senha-forte-123"
    )


@pytest.fixture
def company(user):
    return Company.objects.create(owner=user, name="Loja Exemplo", tax_id="12345678000199")


@pytest.fixture
def other_company(other_user):
    return Company.objects.create(owner=other_user, name="Outra Loja")


@pytest.fixture
def categories(company):
    return {
        "revenue": Category.objects.create(
            company=company, name="Vendas", category_type=Category.CategoryTypes.REVENUE
        ),
        "cost": Category.objects.create(
            company=company,
            name="Mercadorias",
            category_type=Category.CategoryTypes.COST,
            cost_classification=Category.CostClassifications.VARIABLE,
        ),
        "expense": Category.objects.create(
            company=company,
            name="Aluguel",
            category_type=Category.CategoryTypes.EXPENSE,
            cost_classification=Category.CostClassifications.FIXED,
        ),
        "financial_expense": Category.objects.create(
            company=company,
            name="Despesas Financeiras",
            category_type=Category.CategoryTypes.EXPENSE,
        ),
    }


@pytest.fixture
def create_transaction(company):
    def _create(amount, category=None, transaction_date=date(2024, 3, 10), **extra):
        return Transaction.objects.create(
            company=extra.pop("company", company),
            description=extra.pop("description", "Lançamento"),
            amount=Decimal(str(amount)),
            category=category,
            transaction_date=transaction_date,
            **extra,
        )

    return _create


@pytest.fixture
def api_client(user, company):
    client = APIClient()
    client.force_authenticate(user=user)
    client.credentials(HTTP_X_COMPANY_ID=str(company.id))
    return client
