# bakery/api/views_auth.py
import logging

from django.contrib.auth import authenticate, get_user_model
from django.utils import timezone
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from bakery.authentication import clear_auth_cookie, issue_access_token, set_auth_cookie
from bakery.serializers import UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class LoginSerializer(serializers.Serializer):
    # email or username
    login = serializers.CharField()
    password = serializers.CharField(write_only=True)


def _resolve_username(login: str) -> str:
    if "@" in login:
        u = User.objects.filter(email__iexact=login).only("username").first()
        if u:
            return u.username
    return login


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        # bad credentials stay a 401
        return 'Bearer realm="api"'

    def post(self, request):
        s = LoginSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user = authenticate(
            request,
            username=_resolve_username(s.validated_data["login"].strip()),
            password=s.validated_data["password"],
        )
        if user is None or not user.is_active:
            logger.info("Failed login for %r", s.validated_data["login"])
            raise AuthenticationFailed("Invalid credentials.")

        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])

        response = Response({"user": UserSerializer(user).data}, status=200)
        set_auth_cookie(response, issue_access_token(user))
        logger.info("User %s logged in", user.pk)
        return response


class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        response = Response({"message": "Logged out"}, status=200)
        return clear_auth_cookie(response)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"user": UserSerializer(request.user).data}, status=200)
