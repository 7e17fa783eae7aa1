import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class RbacConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'app.platform.rbac'
    verbose_name = 'Role-Based Access Control'

    def ready(self):
        # Fail at boot rather than on the first request
        if getattr(settings, "RBAC_VALIDATE_ON_STARTUP", True):
            from .utils import validate_permission_matrix
            validate_permission_matrix()
            logger.debug("RBAC permission matrix validated")
