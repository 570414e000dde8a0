"""
URL configuration for the dashboard and reports API.
"""

from django.urls import path

from . import views

app_name = "reporting"

urlpatterns = [
    path("api/dashboard/stats", views.dashboard_stats, name="dashboard_stats"),
    path("api/reports/transactions", views.report_transactions, name="report_transactions"),
    path("api/reports/vat-breakdown", views.report_vat_breakdown, name="report_vat_breakdown"),
    path(
        "api/reports/payment-methods",
        views.report_payment_methods,
        name="report_payment_methods",
    ),
    path("api/reports/summary", views.report_summary, name="report_summary"),
]
