"""
Serializers for the client directory.

Field names on the wire use the camelCase contract of the single-page client.
"""

from rest_framework import serializers

from .models import Client


class ClientSerializer(serializers.ModelSerializer):
    """Serializer for client read, create and partial update."""

    taxId = serializers.CharField(source="tax_id", required=False, allow_blank=True, max_length=50)
    isDefault = serializers.BooleanField(source="is_default", required=False)
    isActive = serializers.BooleanField(source="is_active", required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Client
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "taxId",
            "address",
            "isDefault",
            "isActive",
            "createdAt",
        ]
        read_only_fields = ["id"]
        extra_kwargs = {
            "email": {"required": False, "allow_blank": True},
            "phone": {"required": False, "allow_blank": True},
            "address": {"required": False, "allow_blank": True},
        }

    def validate_name(self, value):
        """Reject names made only of whitespace."""
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class ClientSummarySerializer(serializers.ModelSerializer):
    """Compact client representation embedded in transactions."""

    taxId = serializers.CharField(source="tax_id", read_only=True)
    isDefault = serializers.BooleanField(source="is_default", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = Client
        fields = ["id", "name", "email", "phone", "taxId", "address", "isDefault", "isActive"]
