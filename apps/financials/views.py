from datetime import date

from django.db import transaction as db_transaction
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .mixins import ActiveCompanyMixin
from .models import Category, Goal, Transaction
from .permissions import IsCompanyOwner
from .serializers import CategorySerializer, GoalSerializer, TransactionSerializer


class CompanyScopedViewSet(ActiveCompanyMixin, viewsets.ModelViewSet):
    permission_classes = [permissions.IsAuthenticated, IsCompanyOwner]
    company_field = "company"

    def get_queryset(self):
        queryset = super().get_queryset()
        company = self.get_active_company()
        return queryset.filter(**{self.company_field: company})

    def perform_create(self, serializer):
        serializer.save(**{self.company_field: self.get_active_company()})

    def get_serializer_context(self):
        context = super().get_serializer_context()
        try:
            context["company"] = self.get_active_company()
        except (ValidationError, PermissionDenied):
            pass
        return context


class DetailsPagination(PageNumberPagination):
    """Paginação para detalhes (cliente, categoria): 5 itens por página."""
    page_size = 5
    page_size_query_param = "page_size"
    max_page_size = 5


class TransactionPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


def _parse_date_param(request, name):
    raw = request.query_params.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError({name: "Use o formato AAAA-MM-DD."}) from exc


def _parse_int_param(request, name):
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError({name: "Deve ser um inteiro."}) from exc


class CategoryViewSet(CompanyScopedViewSet):
    queryset = Category.objects.all().select_related("company", "parent")
    serializer_class = CategorySerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        category_type = self.request.query_params.get("category_type")
        if category_type:
            if category_type not in Category.CategoryTypes.values:
                raise ValidationError(
                    {"category_type": "Deve ser 'revenue', 'cost' ou 'expense'."}
                )
            queryset = queryset.filter(category_type=category_type)
        if self.action == "list" and self.request.query_params.get("include_inactive") not in {"1", "true"}:
            queryset = queryset.filter(is_active=True)
        return queryset.order_by("display_order", "name")

    def perform_destroy(self, instance):
        # Soft delete: lançamentos históricos continuam apontando para a categoria
        with db_transaction.atomic():
            instance.subcategories.update(is_active=False)
            instance.is_active = False
            instance.save(update_fields=["is_active", "updated_at"])

    def list(self, request, *args, **kwargs):
        """
        Retorna categorias organizadas hierarquicamente por tipo:
        - revenue / cost / expense -> Categoria Pai -> Filhos
        """
        categories = list(self.get_queryset())
        context = self.get_serializer_context()

        parents = {}
        for category in categories:
            if category.parent_id is None:
                data = CategorySerializer(category, context=context).data
                data["subcategories"] = []
                parents[category.id] = data

        for category in categories:
            if category.parent_id and category.parent_id in parents:
                parents[category.parent_id]["subcategories"].append(
                    CategorySerializer(category, context=context).data
                )

        grouped = {value: [] for value in Category.CategoryTypes.values}
        for data in parents.values():
            grouped[data["category_type"]].append(data)

        return Response(grouped)


class TransactionViewSet(CompanyScopedViewSet):
    queryset = Transaction.objects.all().select_related("company", "category", "client")
    serializer_class = TransactionSerializer
    pagination_class = TransactionPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        start_date = _parse_date_param(self.request, "start_date")
        end_date = _parse_date_param(self.request, "end_date")
        month = _parse_int_param(self.request, "month")
        year = _parse_int_param(self.request, "year")

        if start_date:
            queryset = queryset.filter(transaction_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(transaction_date__lte=end_date)
        if month:
            queryset = queryset.filter(month=month)
        if year:
            queryset = queryset.filter(year=year)
        if params.get("category_id"):
            queryset = queryset.filter(category_id=params["category_id"])
        if params.get("client_id"):
            queryset = queryset.filter(client_id=params["client_id"])
        if params.get("search"):
            queryset = queryset.filter(description__icontains=params["search"])
        return queryset

    def perform_create(self, serializer):
        serializer.save(
            company=self.get_active_company(),
            created_by=self.request.user,
        )


class GoalViewSet(CompanyScopedViewSet):
    queryset = Goal.objects.all().select_related("company")
    serializer_class = GoalSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        month = _parse_int_param(self.request, "month")
        year = _parse_int_param(self.request, "year")
        if month:
            queryset = queryset.filter(period_month=month)
        if year:
            queryset = queryset.filter(period_year=year)
        return queryset

    def perform_create(self, serializer):
        data = serializer.validated_data
        if Goal.objects.filter(
            company=self.get_active_company(),
            period_month=data["period_month"],
            period_year=data["period_year"],
            metric_name=data["metric_name"],
        ).exists():
            raise ValidationError(
                {"metric_name": "Já existe meta para esta métrica no período. Use goals/upsert/."}
            )
        super().perform_create(serializer)

    @action(detail=False, methods=["post"], url_path="upsert")
    def upsert(self, request):
        """Cria ou atualiza a meta de (empresa, mês, ano, métrica)."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        goal, created = Goal.objects.update_or_create(
            company=self.get_active_company(),
            period_month=data["period_month"],
            period_year=data["period_year"],
            metric_name=data["metric_name"],
            defaults={"target_value": data["target_value"]},
        )
        return Response(
            self.get_serializer(goal).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
