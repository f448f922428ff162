# placement/apps.py
from django.apps import AppConfig


class PlacementConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "placement"

    def ready(self):
        # enregistre les règles de mixité dans le registre
        from .contraintes import genre  # noqa: F401
