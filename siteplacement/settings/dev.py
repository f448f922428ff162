from .base import *
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env.dev into process env for local development only.
load_dotenv(Path(BASE_DIR) / ".env.dev")


DEBUG = True
ALLOWED_HOSTS = []

# niveaux relus après chargement du .env.dev
LOGGING["root"]["level"] = _level("DJANGO_LOG_LEVEL", "DEBUG")
LOGGING["loggers"]["placement"]["level"] = _level("PLACEMENT_LOG_LEVEL", "DEBUG")

# pas besoin de Redis pour développer les vues : cache local au processus
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "placement-dev",
    }
}

if os.getenv("CELERY_EAGER", "0") == "1":
    CELERY_TASK_ALWAYS_EAGER = True
    CELERY_TASK_STORE_EAGER_RESULT = True
    CELERY_BROKER_URL = "memory://"
    CELERY_RESULT_BACKEND = "cache+memory://"
