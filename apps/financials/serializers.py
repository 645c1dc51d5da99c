from rest_framework import serializers

from apps.reports.goals import GOAL_METRICS
from .models import Category, Goal, Transaction


class CompanyContextMixin:
    company_filtered_fields: tuple[str, ...] = ()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        company = self.context.get("company")
        if not company:
            return
        for field_name in self.company_filtered_fields:
            field = self.fields.get(field_name)
            if not field:
                continue
            queryset = getattr(field, "queryset", None)
            if queryset is None:
                continue
            self.fields[field_name].queryset = queryset.filter(company=company)


class CompanyScopedModelSerializer(CompanyContextMixin, serializers.ModelSerializer):
    pass


class CategorySerializer(CompanyScopedModelSerializer):
    company_filtered_fields = ("parent",)
    is_financial = serializers.BooleanField(read_only=True)

    class Meta:
        model = Category
        fields = (
            "id",
            "company",
            "parent",
            "name",
            "category_type",
            "cost_classification",
            "nature",
            "is_financial",
            "display_order",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "company", "is_financial", "created_at", "updated_at")
        extra_kwargs = {
            "parent": {"required": False, "allow_null": True},
        }

    def validate(self, attrs):
        attrs = super().validate(attrs)
        instance = self.instance
        category_type = attrs.get("category_type", getattr(instance, "category_type", None))
        parent = attrs.get("parent", getattr(instance, "parent", None))

        if instance and "category_type" in attrs and attrs["category_type"] != instance.category_type:
            if instance.transactions.exists():
                raise serializers.ValidationError(
                    {"category_type": "O tipo não pode mudar após a categoria ter lançamentos."}
                )
        if parent is not None:
            if parent.parent_id:
                raise serializers.ValidationError(
                    {"parent": "Apenas um nível de subcategoria é permitido."}
                )
            if parent.category_type != category_type:
                raise serializers.ValidationError(
                    {"parent": "A categoria pai deve ter o mesmo tipo."}
                )
        if category_type == Category.CategoryTypes.REVENUE and attrs.get("cost_classification"):
            raise serializers.ValidationError(
                {"cost_classification": "Classificação fixo/variável só se aplica a custos e despesas."}
            )
        return attrs


class TransactionSerializer(CompanyScopedModelSerializer):
    company_filtered_fields = ("category", "client")
    category_name = serializers.CharField(source="category.name", read_only=True, allow_null=True)
    category_type = serializers.CharField(source="category.category_type", read_only=True, allow_null=True)
    client_name = serializers.CharField(source="client.name", read_only=True, allow_null=True)

    class Meta:
        model = Transaction
        fields = (
            "id",
            "company",
            "category",
            "category_name",
            "category_type",
            "client",
            "client_name",
            "created_by",
            "description",
            "amount",
            "transaction_date",
            "month",
            "year",
            "transaction_type",
            "is_new_client",
            "is_marketing_cost",
            "is_sales_cost",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "company",
            "category_name",
            "category_type",
            "client_name",
            "created_by",
            "month",
            "year",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {
            "category": {"required": False, "allow_null": True},
            "client": {"required": False, "allow_null": True},
        }

    def validate(self, attrs):
        attrs = super().validate(attrs)
        amount = attrs.get("amount")
        if amount is not None and amount < 0:
            raise serializers.ValidationError(
                {"amount": "Amount must not be negative."}
            )
        if amount is not None and not amount.is_finite():
            raise serializers.ValidationError({"amount": "Amount must be a finite number."})

        if attrs.get("is_new_client") and not attrs.get("client", getattr(self.instance, "client", None)):
            raise serializers.ValidationError(
                {"is_new_client": "Informe o cliente para marcar um cliente novo."}
            )
        return attrs


class GoalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Goal
        fields = (
            "id",
            "company",
            "period_month",
            "period_year",
            "metric_name",
            "target_value",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "company", "created_at", "updated_at")
        # Unicidade (empresa, período, métrica) é tratada pelo upsert da view
        validators = []

    def validate_metric_name(self, value):
        if value not in GOAL_METRICS:
            raise serializers.ValidationError(
                f"metric_name deve ser um de: {', '.join(sorted(GOAL_METRICS))}"
            )
        return value
