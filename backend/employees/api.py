from rest_framework import status
from rest_framework.response import Response

from core.api import StorageAPIView

from .serializers import (
    EmployeeCreateSerializer,
    EmployeeDetailSerializer,
    EmployeeSerializer,
    PaymentCreateSerializer,
    PaymentSerializer,
)
from .services.payments import add_payment, delete_payment
from .services.roster import create_employee, delete_employee, get_employee_details, list_employees


class EmployeeListCreateView(StorageAPIView):
    def get(self, request, *args, **kwargs):
        employees = list_employees(self.get_storage())
        return Response(
            {
                "employees": EmployeeSerializer(employees, many=True).data,
                "count": len(employees),
            }
        )

    def post(self, request, *args, **kwargs):
        serializer = EmployeeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        employee = create_employee(self.get_storage(), serializer.validated_data)
        return Response(
            {
                "message": "Employee created successfully",
                "employee": EmployeeSerializer(employee).data,
            },
            status=status.HTTP_201_CREATED,
        )


class EmployeeDetailView(StorageAPIView):
    def get(self, request, username, *args, **kwargs):
        employee, payments = get_employee_details(self.get_storage(), username)
        return Response(EmployeeDetailSerializer({**employee, "payments": payments}).data)

    def delete(self, request, username, *args, **kwargs):
        delete_employee(self.get_storage(), username)
        return Response({"message": "Employee deleted successfully"})


class PaymentCreateView(StorageAPIView):
    def post(self, request, username, *args, **kwargs):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = add_payment(
            self.get_storage(),
            username,
            amount_paid=serializer.validated_data["amount_paid"],
            paid_on=serializer.validated_data["date"],
        )
        return Response(
            {
                "message": "Payment added successfully",
                "payment": PaymentSerializer(payment).data,
            },
            status=status.HTTP_201_CREATED,
        )


class PaymentDetailView(StorageAPIView):
    def delete(self, request, username, payment_id, *args, **kwargs):
        delete_payment(self.get_storage(), username, payment_id)
        return Response({"message": "Payment deleted successfully"})
