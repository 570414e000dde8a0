from django.contrib import admin

from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    """Admin interface for Client model."""

    list_display = ["name", "email", "phone", "tax_id", "is_default", "is_active", "created_at"]
    list_filter = ["is_default", "is_active"]
    search_fields = ["name", "email", "phone", "tax_id"]
    ordering = ["name"]
    readonly_fields = ["id", "created_at"]

    fieldsets = (
        (None, {"fields": ("id", "name", "is_default", "is_active")}),
        ("Contact", {"fields": ("email", "phone", "tax_id", "address")}),
        ("Timestamps", {"fields": ("created_at",)}),
    )

    def has_delete_permission(self, request, obj=None):
        """The default client cannot be removed from the admin either."""
        if obj is not None and obj.is_default:
            return False
        return super().has_delete_permission(request, obj)
