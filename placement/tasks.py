from __future__ import annotations

import logging
from typing import Any, Dict

from celery import shared_task

from .charge_utile import affectations_depuis_payload, construire, rng_depuis_payload
from .contraintes.types import PolitiqueContrainte
from .erreurs import ErreurPlacement
from .modele.affectation import StrategieRemplissage
from .services.remplissage import OrchestrateurRemplissage, ResultatRemplissage

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def t_remplir_grille(self, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Tâche asynchrone de remplissage :
      - monte grille, effectif et groupes dans un entrepôt mémoire éphémère,
      - lance la stratégie demandée avec la politique de mixité demandée,
      - rend l'enregistrement produit, les avertissements et les contrôles.
    """
    try:
        strategie = StrategieRemplissage(payload.get("strategy") or StrategieRemplissage.ALEATOIRE.value)
        politique = PolitiqueContrainte(payload.get("constraintPolicy"))
    except ValueError as exc:
        return {"status": "FAILURE", "error": str(exc)}

    try:
        entrepot, grille, _eleves, groupes = construire(payload)
        correspondance = {a.siege_id: a.eleve_id for a in affectations_depuis_payload(payload.get("assignments"))}
        orchestrateur = OrchestrateurRemplissage(entrepot, rng_depuis_payload(payload))
        resultat: ResultatRemplissage = orchestrateur.remplir(
            grille.id, strategie, politique, correspondance=correspondance, groupes=groupes,
        )
    except ErreurPlacement as exc:
        logger.info("remplissage refusé (%s) : %s", self.request.id, exc)
        return {"status": "FAILURE", "error": str(exc)}

    return {
        "status": "SUCCESS",
        "layout": grille.vers_dict(),
        "record": resultat.enregistrement.vers_dict(),
        "warnings": resultat.avertissements,
        "unplaced": resultat.non_places,
        "freeSeats": resultat.sieges_libres,
        "valid": resultat.est_valide,
        "violations": [v.vers_dict() for v in resultat.violations],
    }
