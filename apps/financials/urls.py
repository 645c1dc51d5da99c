from rest_framework.routers import DefaultRouter

from .views import CategoryViewSet, GoalViewSet, TransactionViewSet

router = DefaultRouter()
router.register('categories', CategoryViewSet, basename='categories')
router.register('transactions', TransactionViewSet, basename='transactions')
router.register('goals', GoalViewSet, basename='goals')

urlpatterns = router.urls
