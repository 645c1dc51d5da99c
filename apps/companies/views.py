import logging

from django.db import transaction
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from apps.reports.tax import resolve_tax_rates
from .models import Company, TaxConfiguration
from .serializers import CompanySerializer, TaxConfigurationSerializer

logger = logging.getLogger(__name__)


class CompanyViewSet(viewsets.ModelViewSet):
    serializer_class = CompanySerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        if not user.is_authenticated:
            return Company.objects.none()
        return Company.objects.filter(owner=user)

    def perform_create(self, serializer):
        if not self.request.user.is_authenticated:
            raise PermissionDenied("Authentication required.")
        company = serializer.save(owner=self.request.user)
        logger.info("Empresa criada: %s (owner=%s)", company.id, self.request.user.pk)

    @action(detail=True, methods=["get", "put"], url_path="tax-configuration")
    def tax_configuration(self, request, pk=None):
        """
        GET: configuração armazenada (ou apenas as alíquotas padrão quando não existe).
        PUT: cria ou atualiza a configuração da empresa.
        """
        company = self.get_object()
        config = TaxConfiguration.objects.filter(company=company).first()

        if request.method == "GET":
            if config is None:
                return Response(
                    {
                        "company": str(company.id),
                        "configured": False,
                        "effective_rates": resolve_tax_rates(None).as_dict(),
                    }
                )
            data = TaxConfigurationSerializer(config).data
            data["configured"] = True
            return Response(data)

        serializer = TaxConfigurationSerializer(config, data=request.data, partial=config is not None)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            saved = serializer.save(company=company)
        data = TaxConfigurationSerializer(saved).data
        data["configured"] = True
        return Response(
            data,
            status=status.HTTP_200_OK if config is not None else status.HTTP_201_CREATED,
        )
