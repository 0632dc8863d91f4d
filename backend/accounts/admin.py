from django.contrib import admin

from .models import AdminUser


@admin.register(AdminUser)
class AdminUserAdmin(admin.ModelAdmin):
    list_display = ("username", "name", "email", "mobile_number", "is_admin_user", "created_at")
    search_fields = ("username", "name", "email")
    exclude = ("password",)
