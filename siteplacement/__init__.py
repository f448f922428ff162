# le worker et les vues partagent la même application Celery
from .celery import app as celery_app

__all__ = ("celery_app",)
