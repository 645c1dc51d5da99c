from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.companies.models import Company
from apps.financials.models import Category

FIXED = Category.CostClassifications.FIXED
VARIABLE = Category.CostClassifications.VARIABLE
OPERATIONAL = Category.Natures.OPERATIONAL
FINANCIAL = Category.Natures.FINANCIAL


class Command(BaseCommand):
    ## docker-compose exec app python manage.py seed_dre_categories <company_id>
    help = "Cria a estrutura padrão de categorias do DRE para uma empresa."

    DEFAULT_STRUCTURE = [
        {
            "name": "Receita de Vendas",
            "category_type": Category.CategoryTypes.REVENUE,
            "children": [
                {"name": "Venda de Produtos"},
                {"name": "Prestação de Serviços"},
            ],
        },
        {
            "name": "Receitas Financeiras",
            "category_type": Category.CategoryTypes.REVENUE,
            "nature": FINANCIAL,
            "children": [
                {"name": "Rendimentos de Aplicações", "nature": FINANCIAL},
            ],
        },
        {
            "name": "Custos dos Produtos Vendidos",
            "category_type": Category.CategoryTypes.COST,
            "cost_classification": VARIABLE,
            "children": [
                {"name": "Matéria-prima", "cost_classification": VARIABLE},
                {"name": "Frete sobre Compras", "cost_classification": VARIABLE},
            ],
        },
        {
            "name": "Despesas Operacionais",
            "category_type": Category.CategoryTypes.EXPENSE,
            "cost_classification": FIXED,
            "nature": OPERATIONAL,
            "children": [
                {"name": "Aluguel", "cost_classification": FIXED, "nature": OPERATIONAL},
                {"name": "Salários", "cost_classification": FIXED, "nature": OPERATIONAL},
                {"name": "Marketing", "cost_classification": VARIABLE, "nature": OPERATIONAL},
                {"name": "Comissões de Vendas", "cost_classification": VARIABLE, "nature": OPERATIONAL},
            ],
        },
        {
            "name": "Despesas Financeiras",
            "category_type": Category.CategoryTypes.EXPENSE,
            "cost_classification": FIXED,
            "nature": FINANCIAL,
            "children": [
                {"name": "Juros e Tarifas Bancárias", "cost_classification": FIXED, "nature": FINANCIAL},
            ],
        },
    ]

    def add_arguments(self, parser):
        parser.add_argument("company_id", help="UUID da empresa.")

    def handle(self, *args, **options):
        try:
            company = Company.objects.get(pk=options["company_id"])
        except (Company.DoesNotExist, ValidationError, ValueError) as exc:
            raise CommandError(f"Empresa não encontrada: {options['company_id']}") from exc

        with transaction.atomic():
            created = self._ensure_structure(company)

        self.stdout.write(
            self.style.SUCCESS(f"[{company.name}] categorias processadas. Criadas: {created}.")
        )

    def _ensure_structure(self, company) -> int:
        created_total = 0
        for order, node in enumerate(self.DEFAULT_STRUCTURE, start=1):
            parent, created = self._get_or_create(company, node, node["category_type"], None, order)
            created_total += int(created)
            for child_order, child in enumerate(node.get("children", []), start=1):
                _, created = self._get_or_create(
                    company, child, node["category_type"], parent, child_order
                )
                created_total += int(created)
        return created_total

    def _get_or_create(self, company, node, category_type, parent, order):
        category = Category.objects.filter(
            company=company,
            parent=parent,
            name=node["name"],
            category_type=category_type,
        ).first()
        if category:
            return category, False
        category = Category.objects.create(
            company=company,
            parent=parent,
            name=node["name"],
            category_type=category_type,
            cost_classification=node.get("cost_classification"),
            nature=node.get("nature"),
            display_order=order,
        )
        return category, True
