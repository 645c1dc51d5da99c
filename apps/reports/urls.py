from django.urls import path

from .views import DREReportView, HistoricalDREView

urlpatterns = [
    path(
        "dre/",
        DREReportView.as_view(),
        name="report-dre",
    ),
    path(
        "dre/history/",
        HistoricalDREView.as_view(),
        name="report-dre-history",
    ),
]
