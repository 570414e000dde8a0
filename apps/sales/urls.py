"""
URL configuration for the sales API.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    path("api/transactions", views.TransactionListView.as_view(), name="transaction_list"),
    path(
        "api/transactions/<uuid:transaction_id>",
        views.TransactionDetailView.as_view(),
        name="transaction_detail",
    ),
    path("api/sales/calculate-totals", views.calculate_totals, name="calculate_totals"),
]
