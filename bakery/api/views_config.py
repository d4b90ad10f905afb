# bakery/api/views_config.py
import logging

from django.db import DatabaseError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from bakery.permissions import IsAdminRole
from bakery.services import config_service

logger = logging.getLogger(__name__)


class SystemConfigView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(config_service.get_config(), status=200)

    def put(self, request):
        data = config_service.update_config(request.data, user=request.user)
        return Response({"message": "Configuration saved", "config": data}, status=200)


class PublicSystemConfigView(APIView):
    """Branding for the login screen. Never fails: falls back to defaults."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        try:
            data = config_service.get_public_config()
        except DatabaseError:
            logger.exception("Public system config unavailable, serving defaults")
            data = config_service.public_defaults()
        return Response(data, status=200)
