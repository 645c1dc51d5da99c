from rest_framework import permissions


class IsCompanyOwner(permissions.BasePermission):
    """
    Ensures requests resolve an active company owned by the requesting user.
    """

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        # get_active_company raises ValidationError or PermissionDenied with useful messages.
        view.get_active_company()
        return True
