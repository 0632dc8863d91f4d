from rest_framework import serializers


class EmployeeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    mobileNumber = serializers.CharField(source="mobile_number", max_length=30)
    email = serializers.EmailField()
    address = serializers.CharField(max_length=255)
    totalAmountToBePaid = serializers.FloatField(source="total_amount_to_be_paid", required=False, default=0)
    totalAmountPaidInAdvance = serializers.FloatField(
        source="total_amount_paid_in_advance", required=False, default=0
    )
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)


class PaymentSerializer(serializers.Serializer):
    id = serializers.ReadOnlyField()
    amountPaid = serializers.FloatField(source="amount_paid", read_only=True)
    date = serializers.DateTimeField(read_only=True)
    employeeId = serializers.ReadOnlyField(source="employee_id")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)


class PaymentCreateSerializer(serializers.Serializer):
    amountPaid = serializers.FloatField(source="amount_paid")
    date = serializers.DateField(
        input_formats=["%Y-%m-%d"],
        error_messages={"invalid": "Invalid date format. Use YYYY-MM-DD"},
    )

    def validate_amountPaid(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount paid must be greater than zero.")
        return value


class EmployeeSerializer(serializers.Serializer):
    """Public view of an employee record; never includes the password hash."""

    id = serializers.ReadOnlyField()
    name = serializers.CharField()
    mobileNumber = serializers.CharField(source="mobile_number")
    email = serializers.EmailField()
    address = serializers.CharField()
    totalAmountToBePaid = serializers.FloatField(source="total_amount_to_be_paid")
    totalAmountPaidInAdvance = serializers.FloatField(source="total_amount_paid_in_advance")
    username = serializers.CharField()
    isEmployee = serializers.BooleanField(source="is_employee")
    createdAt = serializers.DateTimeField(source="created_at", required=False)
    updatedAt = serializers.DateTimeField(source="updated_at", required=False)


class EmployeeDetailSerializer(EmployeeSerializer):
    payments = PaymentSerializer(many=True, read_only=True)
