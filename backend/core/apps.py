import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    name = "core"
    default_auto_field = "django.db.models.BigAutoField"
    storage = None

    def ready(self):
        from .storage import build_storage

        self.storage = build_storage()
        logger.info("Using %s storage", type(self.storage).__name__)
