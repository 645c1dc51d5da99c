from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import PermissionDenied, ValidationError

from apps.companies.models import Company


class ActiveCompanyMixin:
    """
    Resolve the active company from the request (header, query param or body)
    and enforce that the authenticated user owns it on every request.
    """

    def get_active_company(self) -> Company:
        if hasattr(self.request, "_cached_active_company"):
            return self.request._cached_active_company

        user = self.request.user
        if not user or not user.is_authenticated:
            raise PermissionDenied("Authentication required.")

        company_id = (
            self.request.headers.get("X-Company-ID")
            or self.request.query_params.get("company_id")
            or self._get_company_id_from_body()
        )

        if not company_id:
            # Fallback: pick the user's first company as a default.
            company = Company.objects.filter(owner=user).order_by("created_at").first()
            if company:
                self.request._cached_active_company = company
                return company

            raise ValidationError(
                "Active company not provided. Use the X-Company-ID header or create a company first."
            )

        try:
            company = Company.objects.get(pk=company_id)
        except (Company.DoesNotExist, DjangoValidationError, ValueError) as exc:
            raise ValidationError("Company not found.") from exc

        self._ensure_ownership(company)
        self.request._cached_active_company = company
        return company

    def _get_company_id_from_body(self):
        data = getattr(self.request, "data", None)
        if not hasattr(data, "get"):
            return None
        return data.get("company_id")

    def _ensure_ownership(self, company: Company) -> None:
        if company.owner_id != self.request.user.pk:
            raise PermissionDenied("You do not belong to this company.")
