# registry_core/apps.py

from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class RegistryCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "registry_core"
    verbose_name = "Marriage registry workflow"

    def ready(self):
        from . import signals  # noqa

        logger.debug("Registry workflow signals registered")
