from __future__ import annotations

from typing import Any

from django.conf import settings

# valeurs par défaut quand Django n'est pas configuré (CLI, scripts)
DEFAUTS: dict[str, Any] = {
    "PLACEMENT_REVELATION_VITESSE_MS": 1000,
    "PLACEMENT_REVELATION_MELANGES": 5,
    "PLACEMENT_REVELATION_PAUSE_MS": 200,
    "PLACEMENT_REVELATION_MARGE_MS": 1000,
    "PLACEMENT_DEPOT_TTL": None,
}


def reglage(nom: str, defaut: Any = None) -> Any:
    """Lit un réglage `PLACEMENT_*` dans les settings Django, sinon la valeur par défaut."""
    valeur_defaut: Any = DEFAUTS.get(nom, defaut) if defaut is None else defaut
    if not settings.configured:
        return valeur_defaut
    return getattr(settings, nom, valeur_defaut)
