from django.apps import AppConfig


class HorusConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "horus"
    verbose_name = "Horus metric expressions"
