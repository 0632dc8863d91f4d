from django.contrib import admin

from .models import Employee, Payment


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("username", "name", "mobile_number", "total_amount_to_be_paid", "total_amount_paid_in_advance")
    search_fields = ("username", "name", "email")
    exclude = ("password",)
    inlines = [PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("employee", "amount_paid", "date", "created_at")
    list_filter = ("date",)
    search_fields = ("employee__username",)
