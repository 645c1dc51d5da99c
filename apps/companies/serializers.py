from rest_framework import serializers

from apps.reports.tax import resolve_tax_rates
from .models import Company, TaxConfiguration


class CompanySerializer(serializers.ModelSerializer):
    owner = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Company
        fields = (
            "id",
            "owner",
            "name",
            "tax_id",
            "tax_regime",
            "fiscal_period",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "owner", "created_at", "updated_at")

    def validate_tax_id(self, value):
        if value == "":
            return None
        return value


class TaxConfigurationSerializer(serializers.ModelSerializer):
    effective_rates = serializers.SerializerMethodField()

    class Meta:
        model = TaxConfiguration
        fields = (
            "id",
            "company",
            "use_das",
            "das_rate",
            "icms_rate",
            "ipi_rate",
            "pis_rate",
            "cofins_rate",
            "iss_rate",
            "irpj_rate",
            "irpj_additional_rate",
            "irpj_additional_threshold",
            "csll_rate",
            "effective_rates",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "company", "effective_rates", "created_at", "updated_at")

    def get_effective_rates(self, obj):
        return resolve_tax_rates(obj).as_dict()
