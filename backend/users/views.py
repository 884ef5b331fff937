# backend/users/views.py
from django.contrib.auth import authenticate
from rest_framework import status, generics
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema, OpenApiExample
import logging

from .models import User, Student
from .permissions import is_admin_user
from .serializers import UserSerializer, LoginSerializer

logger = logging.getLogger(__name__)


def _resolve_username(login):
    """Students may log in with their roll number instead of the username."""
    login = (login or "").strip()
    student = (Student.objects.select_related("user")
               .filter(roll_no__iexact=login)
               .first())
    if student:
        return student.user.username
    return login


class LoginView(generics.CreateAPIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = LoginSerializer

    @extend_schema(
        request=LoginSerializer,
        responses={200: dict},
        examples=[OpenApiExample('Login', value={'username': '21CS1042', 'password': 'secret123'})],
    )
    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=_resolve_username(s.validated_data["username"]),
            password=s.validated_data["password"],
        )
        if not user:
            logger.info("Failed login for %s", s.validated_data["username"])
            return Response({"error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        profile = getattr(user, "student", None)
        if profile and profile.status == Student.STATUS_REJECTED:
            return Response({"error": "Account registration was rejected"}, status=status.HTTP_403_FORBIDDEN)

        refresh = RefreshToken.for_user(user)
        return Response({
            "user": UserSerializer(user).data,
            "role": "admin" if is_admin_user(user) else "student",
            "tokens": {
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            },
        }, status=status.HTTP_200_OK)


class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)
