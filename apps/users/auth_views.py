"""Views for the admin console and team portal login flows."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .auth_serializers import LoginSerializer
from .identity import extract_credential
from .models import AuthSession
from .serializers import TeamProfileSerializer
from .services import close_session, login_account, session_ttl


def _set_session_cookie(response: Response, name: str, token: str, kind: str, samesite: str) -> None:
    response.set_cookie(
        name,
        token,
        max_age=int(session_ttl(kind).total_seconds()),
        httponly=True,
        secure=not settings.DEBUG,
        samesite=samesite,
        path="/",
    )


class _LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    kind: str = ""
    cookie_setting: str = ""
    samesite = "Lax"

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, token = login_account(
            serializer.validated_data["username"],
            serializer.validated_data["password"],
            kind=self.kind,
        )
        response = Response(self.payload(user, token), status=status.HTTP_200_OK)
        _set_session_cookie(response, settings.IDENTITY[self.cookie_setting], token, self.kind, self.samesite)
        return response

    def payload(self, user, token: str) -> dict:
        return {"success": True, "token": token}


class _LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    cookie_setting: str = ""

    def post(self, request):  # type: ignore
        cookie_name = settings.IDENTITY[self.cookie_setting]
        close_session(extract_credential(request, [cookie_name]))
        response = Response({"success": True}, status=status.HTTP_200_OK)
        response.delete_cookie(cookie_name, path="/")
        return response


class AdminLoginView(_LoginView):
    kind = AuthSession.Kind.ADMIN
    cookie_setting = "ADMIN_COOKIE_NAME"
    samesite = "Lax"


class AdminLogoutView(_LogoutView):
    cookie_setting = "ADMIN_COOKIE_NAME"


class AdminMeView(APIView):
    """Reports whether the caller holds an administrator identity."""

    permission_classes = [AllowAny]

    def get(self, request):  # type: ignore
        identity = request.user
        if not getattr(identity, "is_admin", False):
            return Response({"authenticated": False})
        data = {"authenticated": True, "role": identity.role, "subject": identity.subject}
        if identity.user is not None:
            data["username"] = identity.user.username
        return Response(data)


class TeamLoginView(_LoginView):
    kind = AuthSession.Kind.TEAM
    cookie_setting = "TEAM_COOKIE_NAME"
    samesite = "Strict"

    def payload(self, user, token: str) -> dict:
        return {"success": True, "token": token, "user": TeamProfileSerializer(user).data}


class TeamLogoutView(_LogoutView):
    cookie_setting = "TEAM_COOKIE_NAME"


class TeamMeView(APIView):
    """Profile of the logged-in team member."""

    permission_classes = [AllowAny]

    def get(self, request):  # type: ignore
        identity = request.user
        if not getattr(identity, "is_team", False) and not getattr(identity, "is_admin", False):
            return Response({"authenticated": False})
        if identity.user is not None:
            user_data = TeamProfileSerializer(identity.user).data
            user_data["allowed_accommodations"] = list(identity.allowed_accommodation_ids)
        else:
            user_data = {
                "id": None,
                "username": identity.subject,
                "name": "",
                "allowed_accommodations": list(identity.allowed_accommodation_ids),
            }
        return Response({"authenticated": True, "role": identity.role, "user": user_data})
