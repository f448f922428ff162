# placement/views.py
from __future__ import annotations

"""
Vues JSON de l'application "placement".

Contenu :
- Sonde de santé (sante)
- Démarrage et polling d'une tâche Celery de remplissage (remplir_start / remplir_status)
- Génération d'une séquence de révélation (revelation)
- Recommandation de politique de mixité et de groupes de voisins (recommandation)

Les vues ne font que convertir JSON <-> objets du cœur ; aucune logique de
placement ici. `DonneesInvalides` donne un 400, `Introuvable` un 404.
"""

import json
import logging
from functools import wraps
from typing import Any, Callable, Dict

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .charge_utile import affectations_depuis_payload, eleves_depuis_payload, rng_depuis_payload
from .contraintes.genre import ResolveurGenre
from .contraintes.types import TypeContrainteVoisins
from .contraintes.voisins import Recommandation, recommander_groupes
from .depot.entrepot import Entrepot
from .erreurs import DonneesInvalides, Introuvable
from .revelation.sequence import ConfigRevelation, ModeRevelation, SequenceRevelation, generer_sequence

logger = logging.getLogger(__name__)


def _lire_json(request: HttpRequest) -> Dict[str, Any]:
    try:
        data = json.loads((request.body or b"{}").decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DonneesInvalides("JSON invalide") from exc
    if not isinstance(data, dict):
        raise DonneesInvalides("Objet JSON attendu")
    return data


def api_json(vue: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
    """Traduit les erreurs du cœur en réponses JSON (400 / 404)."""

    @wraps(vue)
    def enveloppe(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        try:
            return vue(request, *args, **kwargs)
        except DonneesInvalides as exc:
            return JsonResponse({"error": str(exc), "errors": exc.erreurs}, status=400)
        except Introuvable as exc:
            return JsonResponse({"error": str(exc)}, status=404)

    return enveloppe


# ---------------------------------------------------------------------------
# Santé
# ---------------------------------------------------------------------------

def sante(request: HttpRequest) -> HttpResponse:
    """
    Sonde de santé (sans cache ni broker), utile pour load balancer / monitoring.
    """
    return JsonResponse({"ok": True, "service": "placement", "version": 1})


# ---------------------------------------------------------------------------
# Celery : démarrage + polling
# ---------------------------------------------------------------------------

@csrf_exempt
@require_POST
@api_json
def remplir_start(request: HttpRequest) -> HttpResponse:
    """
    Lance la tâche Celery de remplissage :
    - Body : JSON (layout, students, groups, strategy, constraintPolicy, assignments, seed)
    - Réponse : {"task_id": "..."} à poller via remplir_status
    """
    from .tasks import t_remplir_grille

    data: Dict[str, Any] = _lire_json(request)
    task = t_remplir_grille.delay(data)
    return JsonResponse({"task_id": task.id})


@require_GET
def remplir_status(request: HttpRequest, task_id: str) -> HttpResponse:
    """
    Polling d'état (PENDING / STARTED / SUCCESS / FAILURE).
    En cas de SUCCESS, renvoie aussi le résultat de la tâche.
    """
    from celery.result import AsyncResult

    ar = AsyncResult(task_id)
    if ar.state in ("PENDING", "RECEIVED", "STARTED", "RETRY"):
        return JsonResponse({"status": ar.state})
    if ar.state == "SUCCESS":
        return JsonResponse(ar.result)  # type: ignore[arg-type]

    # FAILURE : le résultat porte l'exception levée par la tâche
    logger.warning("tâche %s en échec : %r", task_id, ar.result)
    return JsonResponse({"status": "FAILURE", "error": str(ar.result) or "échec."})


# ---------------------------------------------------------------------------
# Révélation et recommandations (synchrones, sans état)
# ---------------------------------------------------------------------------

@csrf_exempt
@require_POST
@api_json
def revelation(request: HttpRequest) -> HttpResponse:
    """
    Body : {"mode": "lottery"|"direct", "students": [...], "assignments": [...] ou {siege: eleve},
            "speed": ms, "shuffleCount": n, "pauseMs": ms, "multiplier": x, "seed": n}
    Réponse : {"frames": [...], "duration_ms": ...}
    """
    data: Dict[str, Any] = _lire_json(request)
    try:
        mode = ModeRevelation(data.get("mode") or ModeRevelation.LOTERIE.value)
        multiplicateur = float(data.get("multiplier", 1.0))
        config: ConfigRevelation = ConfigRevelation.depuis_reglages(
            vitesse_ms=data.get("speed"), melanges=data.get("shuffleCount"), pause_ms=data.get("pauseMs"),
        )
    except DonneesInvalides:
        raise
    except (TypeError, ValueError) as exc:
        raise DonneesInvalides(str(exc)) from exc

    eleves = eleves_depuis_payload(Entrepot.en_memoire(), data.get("students") or [])
    sequence: SequenceRevelation = generer_sequence(
        affectations_depuis_payload(data.get("assignments")),
        eleves,
        mode,
        config,
        multiplicateur,
        rng=rng_depuis_payload(data),
    )
    return JsonResponse(sequence.vers_dict())


@csrf_exempt
@require_POST
@api_json
def recommandation(request: HttpRequest) -> HttpResponse:
    """
    Body : {"students": [...], "groupCount": n, "groupConstraint": "mixed_gender"|..., "seed": n}
    Réponse : {"policy": "...", "groups": {...}}
    """
    data: Dict[str, Any] = _lire_json(request)
    eleves = eleves_depuis_payload(Entrepot.en_memoire(), data.get("students") or [])
    try:
        nombre: int = int(data.get("groupCount", 0))
        type_contrainte = TypeContrainteVoisins(data.get("groupConstraint"))
    except (TypeError, ValueError) as exc:
        raise DonneesInvalides(str(exc)) from exc

    groupes: Recommandation = recommander_groupes(eleves, nombre, type_contrainte, rng_depuis_payload(data))
    return JsonResponse({
        "policy": ResolveurGenre.recommander(eleves).value,
        "groups": groupes.vers_dict(),
    })
