from django.contrib import admin

from .models import Category, Goal, Transaction


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "company",
        "category_type",
        "cost_classification",
        "nature",
        "parent",
        "display_order",
        "is_active",
    )
    search_fields = ("name", "company__name")
    list_filter = ("category_type", "nature", "is_active", "company")
    ordering = ("company__name", "display_order", "name")
    autocomplete_fields = ("parent",)


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = (
        "description",
        "company",
        "category",
        "client",
        "amount",
        "transaction_date",
        "transaction_type",
        "is_new_client",
        "is_marketing_cost",
        "is_sales_cost",
    )
    autocomplete_fields = ("company", "category", "client")
    search_fields = ("description", "company__name", "client__name")
    list_filter = ("transaction_type", "year", "month", "company")
    date_hierarchy = "transaction_date"


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ("metric_name", "company", "period_month", "period_year", "target_value")
    search_fields = ("metric_name", "company__name")
    list_filter = ("period_year", "metric_name", "company")
