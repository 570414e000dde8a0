"""
API views for the client directory.

Routes:
- GET/POST          /api/clients
- GET               /api/clients/default
- GET/PUT/PATCH/DELETE /api/clients/<id>
- POST              /api/init
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import ClientSerializer
from .services import ClientDirectory

logger = logging.getLogger(__name__)


class ClientListView(APIView):
    """List clients ordered by name, or create a new one."""

    def get(self, request):
        clients = ClientDirectory().list()
        return Response(ClientSerializer(clients, many=True).data)

    def post(self, request):
        serializer = ClientSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client = ClientDirectory().create(serializer.validated_data)
        return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)


class ClientDetailView(APIView):
    """Retrieve, partially update or delete a single client."""

    def get(self, request, client_id):
        client = ClientDirectory().get(client_id)
        return Response(ClientSerializer(client).data)

    def put(self, request, client_id):
        directory = ClientDirectory()
        client = directory.get(client_id)
        serializer = ClientSerializer(client, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        client = directory.update(client_id, serializer.validated_data)
        return Response(ClientSerializer(client).data)

    patch = put

    def delete(self, request, client_id):
        ClientDirectory().delete(client_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["GET"])
def default_client(request):
    """Return the default client, or ``null`` when none has been bootstrapped yet."""
    client = ClientDirectory().get_default()
    return Response(ClientSerializer(client).data if client else None)


@api_view(["POST"])
def initialize(request):
    """Create the generic default client when it does not exist."""
    created = ClientDirectory().ensure_default()
    if created:
        logger.info("Initialization created the default client")
    return Response({"message": "Initialization completed", "created": created is not None})
