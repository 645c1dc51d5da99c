from django.contrib import admin

from .models import Company, TaxConfiguration


class TaxConfigurationInline(admin.StackedInline):
    model = TaxConfiguration
    can_delete = False
    extra = 0


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "tax_id", "tax_regime", "owner", "created_at")
    list_filter = ("tax_regime", "fiscal_period", "created_at")
    search_fields = ("name", "tax_id", "owner__email")
    readonly_fields = ("created_at", "updated_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    inlines = [TaxConfigurationInline]

    fieldsets = (
        (None, {"fields": ("name", "tax_id", "owner")}),
        ("Tributação", {"fields": ("tax_regime", "fiscal_period")}),
        ("Audit", {"fields": ("created_at", "updated_at")}),
    )


@admin.register(TaxConfiguration)
class TaxConfigurationAdmin(admin.ModelAdmin):
    list_display = ("company", "use_das", "das_rate", "icms_rate", "irpj_rate", "csll_rate")
    list_filter = ("use_das",)
    search_fields = ("company__name",)
