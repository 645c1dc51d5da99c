from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from apps.companies.models import Company
from .models import User, name_validator


class UserAuthenticationSerializer(serializers.ModelSerializer):
    companies = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ("id", "full_name", "email", "companies")
        read_only_fields = fields

    def get_companies(self, obj):
        return [
            {"id": str(company.id), "name": company.name, "tax_regime": company.tax_regime}
            for company in obj.companies.order_by("created_at")
        ]


class RegisterSerializer(serializers.ModelSerializer):
    """
    Cadastro do dono. Quando company_name é enviado, a primeira empresa
    já nasce vinculada ao usuário.
    """

    password = serializers.CharField(write_only=True, min_length=8)
    full_name = serializers.CharField(validators=[name_validator])
    company_name = serializers.CharField(write_only=True, required=False, max_length=255)
    tax_regime = serializers.ChoiceField(
        choices=Company.TaxRegimes.choices,
        write_only=True,
        required=False,
        default=Company.TaxRegimes.SIMPLES_NACIONAL,
    )

    class Meta:
        model = User
        fields = ("full_name", "email", "password", "company_name", "tax_regime")

    def validate_full_name(self, value):
        return " ".join(value.split())

    def create(self, validated_data):
        company_name = validated_data.pop("company_name", None)
        tax_regime = validated_data.pop("tax_regime")
        password = validated_data.pop("password")
        with transaction.atomic():
            user = User.objects.create_user(password=password, **validated_data)
            if company_name:
                Company.objects.create(owner=user, name=company_name, tax_regime=tax_regime)
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        request = self.context.get("request")
        user = authenticate(
            request=request, username=attrs.get("email"), password=attrs.get("password")
        )
        if not user:
            raise serializers.ValidationError("Credenciais inválidas.")

        attrs["user"] = user
        refresh = RefreshToken.for_user(user)
        attrs["refresh"] = str(refresh)
        attrs["access"] = str(refresh.access_token)
        return attrs
