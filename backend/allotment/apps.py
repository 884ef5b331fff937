from django.apps import AppConfig


class AllotmentConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "allotment"
