from rest_framework import status
from rest_framework.exceptions import APIException


class DataFetchError(APIException):
    """Falha ao ler transações/configuração do banco. O cálculo é abortado."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Não foi possível carregar os dados financeiros. Tente novamente."
    default_code = "data_fetch_error"


class CalculationError(APIException):
    """Entrada numérica inválida (não finita, negativa ou malformada)."""

    status_code = 422
    default_detail = "Dados inválidos para o cálculo financeiro."
    default_code = "calculation_error"
