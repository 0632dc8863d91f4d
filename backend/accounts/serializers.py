from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class AdminUserSerializer(serializers.Serializer):
    """Expose the public fields of an admin user; the password hash stays private."""

    id = serializers.ReadOnlyField()
    name = serializers.CharField()
    mobileNumber = serializers.CharField(source="mobile_number")
    email = serializers.EmailField()
    username = serializers.CharField()
    isAdminUser = serializers.BooleanField(source="is_admin_user")
    createdAt = serializers.DateTimeField(source="created_at")


class AdminUserCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    mobileNumber = serializers.CharField(source="mobile_number", max_length=30)
    email = serializers.EmailField()
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)


class AdminUserUpdateSerializer(serializers.Serializer):
    """Partial update of an admin user's contact details and, optionally, password."""

    name = serializers.CharField(max_length=200, required=False)
    mobileNumber = serializers.CharField(source="mobile_number", max_length=30, required=False)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get("password"):
            attrs.pop("password", None)
        return attrs
