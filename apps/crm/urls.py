"""
URL configuration for the client directory API.
"""

from django.urls import path

from . import views

app_name = "crm"

urlpatterns = [
    path("api/clients", views.ClientListView.as_view(), name="client_list"),
    path("api/clients/default", views.default_client, name="client_default"),
    path("api/clients/<uuid:client_id>", views.ClientDetailView.as_view(), name="client_detail"),
    path("api/init", views.initialize, name="initialize"),
]
