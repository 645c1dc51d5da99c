from django.urls import path

from .views import MetricsHistoryView, MetricsView

urlpatterns = [
    path(
        "metrics/",
        MetricsView.as_view(),
        name="dashboard-metrics",
    ),
    path(
        "metrics/history/",
        MetricsHistoryView.as_view(),
        name="dashboard-metrics-history",
    ),
]
