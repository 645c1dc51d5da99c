from decimal import Decimal

from django.db.models import Count, Max, Min, Sum
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.financials.models import Category, Transaction
from apps.financials.serializers import TransactionSerializer
from apps.financials.views import CompanyScopedViewSet, DetailsPagination
from .models import Client
from .serializers import ClientSerializer


class ClientViewSet(CompanyScopedViewSet):
    queryset = Client.objects.all().select_related("company")
    serializer_class = ClientSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        # Inativos só aparecem quando pedidos explicitamente (soft delete)
        if self.action == "list" and self.request.query_params.get("include_inactive") not in {"1", "true"}:
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=["is_active", "updated_at"])

    @action(detail=True, methods=["get"], url_path="details")
    def details(self, request, pk=None):
        """
        Retorna o cliente com o resumo de compras (transações de receita)
        e as últimas transações, paginadas de 5 em 5.
        """
        client = self.get_object()

        paginator = DetailsPagination()
        page = int(request.query_params.get("transactions_page", 1))
        page_size = paginator.page_size

        transactions_qs = (
            client.transactions.all()
            .select_related("category", "client")
            .order_by("-transaction_date", "-created_at")
        )
        total_transactions = transactions_qs.count()
        start = (page - 1) * page_size
        transactions = transactions_qs[start:start + page_size]
        total_pages = (total_transactions + page_size - 1) // page_size if total_transactions > 0 else 1

        purchases = transactions_qs.filter(
            category__category_type=Category.CategoryTypes.REVENUE
        ).aggregate(
            count=Count("id"),
            total=Sum("amount"),
            first=Min("transaction_date"),
            last=Max("transaction_date"),
        )

        return Response({
            "client": ClientSerializer(client, context=self.get_serializer_context()).data,
            "summary": {
                "purchases_count": purchases["count"],
                "total_revenue": purchases["total"] or Decimal("0"),
                "first_purchase": purchases["first"],
                "last_purchase": purchases["last"],
                "is_repeat_customer": purchases["count"] > 1,
            },
            "transactions": {
                "items": TransactionSerializer(transactions, many=True, context=self.get_serializer_context()).data,
                "pagination": {
                    "page": page,
                    "page_size": page_size,
                    "total_pages": total_pages,
                    "total_items": total_transactions,
                    "has_next": page < total_pages,
                    "has_previous": page > 1,
                },
            },
        })
