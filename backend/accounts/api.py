from rest_framework import status
from rest_framework.response import Response

from core.api import StorageAPIView
from employees.serializers import EmployeeSerializer

from .serializers import (
    AdminUserCreateSerializer,
    AdminUserSerializer,
    AdminUserUpdateSerializer,
    LoginSerializer,
)
from .services.admins import create_admin_user, delete_admin_user, list_admin_users, update_admin_user
from .services.auth import authenticate_admin, authenticate_employee

INVALID_CREDENTIALS = {"error": "Invalid username or password"}


class LoginView(StorageAPIView):
    """Authenticate an employee by username + password; no token is issued."""

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        employee = authenticate_employee(self.get_storage(), **serializer.validated_data)
        if employee is None:
            return Response(INVALID_CREDENTIALS, status=status.HTTP_401_UNAUTHORIZED)

        payload = EmployeeSerializer(employee).data
        payload.pop("createdAt", None)
        payload.pop("updatedAt", None)
        return Response({"employee": payload})


class AdminLoginView(StorageAPIView):
    """Authenticate an admin user; the response carries the admin flag."""

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin = authenticate_admin(self.get_storage(), **serializer.validated_data)
        if admin is None:
            return Response(INVALID_CREDENTIALS, status=status.HTTP_401_UNAUTHORIZED)

        payload = AdminUserSerializer(admin).data
        payload.pop("createdAt", None)
        payload["isAdmin"] = payload.pop("isAdminUser")
        return Response({"admin": payload})


class AdminUserListCreateView(StorageAPIView):
    def get(self, request, *args, **kwargs):
        admins = list_admin_users(self.get_storage())
        return Response(
            {
                "admins": AdminUserSerializer(admins, many=True).data,
                "count": len(admins),
            }
        )

    def post(self, request, *args, **kwargs):
        serializer = AdminUserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin = create_admin_user(self.get_storage(), serializer.validated_data)
        return Response(
            {
                "message": "Admin user created successfully",
                "admin": AdminUserSerializer(admin).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AdminUserDetailView(StorageAPIView):
    def put(self, request, username, *args, **kwargs):
        serializer = AdminUserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_admin_user(self.get_storage(), username, serializer.validated_data)
        return Response({"message": "Admin user updated successfully"})

    def delete(self, request, username, *args, **kwargs):
        delete_admin_user(self.get_storage(), username)
        return Response({"message": "Admin user deleted successfully"})
