from django.apps import AppConfig
from django.contrib import admin


class RegistrarConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "registrar"
    verbose_name = "Course Registration"

    def ready(self) -> None:
        """Configure admin site when the app is ready"""
        from django.conf import settings

        admin.site.site_header = getattr(
            settings, "ADMIN_SITE_HEADER", "Course Registration Administration"
        )
        admin.site.site_title = getattr(
            settings, "ADMIN_SITE_TITLE", "Course Registration Admin"
        )
        admin.site.index_title = getattr(
            settings, "ADMIN_INDEX_TITLE", "Welcome to Course Registration Administration"
        )
