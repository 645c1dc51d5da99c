from rest_framework.routers import SimpleRouter

from .views import CompanyViewSet

router = SimpleRouter()
# Expose company endpoints directly under /api/v1/companies/
router.register('', CompanyViewSet, basename='companies')

urlpatterns = router.urls
