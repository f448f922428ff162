from .base import *

SECRET_KEY = "test-only"
DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "placement-test",
    }
}

# Celery 5 : exécution synchrone, broker et résultats en mémoire
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_TASK_STORE_EAGER_RESULT = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# délais de révélation courts et déterministes
PLACEMENT_REVELATION_VITESSE_MS = 1000
PLACEMENT_REVELATION_MELANGES = 5
PLACEMENT_REVELATION_PAUSE_MS = 200
PLACEMENT_REVELATION_MARGE_MS = 1000
PLACEMENT_DEPOT_TTL = None
