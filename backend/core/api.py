from django.apps import apps
from django.conf import settings
from django.http import JsonResponse
from rest_framework.response import Response
from rest_framework.views import APIView

from .storage import Storage


class StorageAPIView(APIView):
    """
    Base view for endpoints that talk to the configured store.

    ``storage`` may be supplied through ``as_view(storage=...)``; otherwise the
    instance built by the core app at start-up is used.
    """

    storage: Storage | None = None

    def get_storage(self) -> Storage:
        if self.storage is not None:
            return self.storage
        return apps.get_app_config("core").storage


class HealthView(APIView):
    def get(self, request, *args, **kwargs):
        return Response(
            {
                "status": "UP",
                "message": f"Server is running on port {settings.PORT}",
            }
        )


def not_found(request, exception=None):
    return JsonResponse({"error": "Not found"}, status=404)
