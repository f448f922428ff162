"""
Conversion des charges utiles JSON (front, tâche Celery) en objets du cœur.

Format attendu (toutes les clés sauf `layout` et `students` sont facultatives) :

    {
      "layout": {"name": "Salle 102", "rows": 5, "cols": 6,
                 "seatNumberingMode": "sequential", "specialSeats": ["siege_0_0"]},
      "students": [{"id": "a", "name": "Alice", "gender": "female",
                    "specialNeeds": false, "preferredSeatId": null}],
      "groups": [{"name": "Binôme 1", "studentIds": ["a", "b"]}],
      "strategy": "random" | "manual" | "mixed",
      "constraintPolicy": "none" | "mixed_gender" | "same_gender",
      "assignments": {"siege_0_1": "a"},
      "seed": 42
    }
"""
from __future__ import annotations

import random
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .depot.entrepot import Entrepot
from .erreurs import DonneesInvalides
from .modele.affectation import Affectation
from .modele.eleve import Eleve
from .modele.grille import Grille
from .modele.groupe import GroupeVoisins
from .modele.siege import ModeNumerotation, TypeSiege
from .modele.validation import lire_booleen
from .services.eleves import GestionnaireEleves
from .services.grilles import GestionnaireGrilles
from .services.groupes import GestionnaireGroupes


def rng_depuis_payload(payload: Mapping[str, Any]) -> Optional[random.Random]:
    """Générateur graine si `seed` est fourni, sinon `None` (hasard global)."""
    graine = payload.get("seed")
    if graine is None:
        return None
    try:
        return random.Random(int(graine))
    except (TypeError, ValueError) as exc:
        raise DonneesInvalides(f"Graine invalide : {graine!r}") from exc


def _entier(valeur: Any, libelle: str) -> int:
    try:
        return int(valeur)
    except (TypeError, ValueError) as exc:
        raise DonneesInvalides(f"{libelle} : entier attendu, reçu {valeur!r}") from exc


def grille_depuis_payload(entrepot: Entrepot, layout: Mapping[str, Any]) -> Grille:
    grilles = GestionnaireGrilles(entrepot.grilles)
    mode: str = str(layout.get("seatNumberingMode") or ModeNumerotation.SEQUENTIEL.value)
    try:
        mode_numerotation = ModeNumerotation(mode)
    except ValueError as exc:
        raise DonneesInvalides(f"Mode de numérotation inconnu : {mode!r}") from exc
    grille: Grille = grilles.creer(
        str(layout.get("name") or "Salle"),
        _entier(layout.get("rows"), "rows"),
        _entier(layout.get("cols"), "cols"),
        mode_numerotation,
        par_defaut=True,
    )
    for siege_id in layout.get("specialSeats", []) or []:
        grille = grilles.changer_type_siege(grille.id, str(siege_id), TypeSiege.SPECIAL)
    return grille


def eleves_depuis_payload(entrepot: Entrepot, students: Sequence[Mapping[str, Any]]) -> List[Eleve]:
    """Ajoute les élèves au dépôt (identifiants fournis conservés, noms uniques exigés)."""
    gestion = GestionnaireEleves(entrepot.eleves)
    out: List[Eleve] = []
    for s in students:
        options: Dict[str, Any] = {
            "besoins_particuliers": lire_booleen(s.get("specialNeeds", False)),
            "siege_prefere_id": s.get("preferredSeatId"),
        }
        if s.get("id") is not None:
            options["id"] = str(s["id"])
        out.append(gestion.ajouter(str(s.get("name") or ""), str(s.get("gender") or ""), **options))
    return out


def groupes_depuis_payload(entrepot: Entrepot, groups: Sequence[Mapping[str, Any]],
                           grille_id: Optional[str] = None) -> List[GroupeVoisins]:
    gestion = GestionnaireGroupes(entrepot.groupes, entrepot.eleves)
    return [
        gestion.creer([str(i) for i in g.get("studentIds", [])], g.get("name"), grille_id)
        for g in groups
    ]


def affectations_depuis_payload(brutes: Any) -> List[Affectation]:
    """Accepte un mapping {siege_id: eleve_id} ou une liste de {seatId, studentId}."""
    if isinstance(brutes, Mapping):
        return [Affectation(str(s), str(e)) for s, e in brutes.items()]
    try:
        return [Affectation.depuis_dict(a) for a in brutes or []]
    except (KeyError, TypeError) as exc:
        raise DonneesInvalides("Affectations mal formées") from exc


def construire(payload: Mapping[str, Any]) -> Tuple[Entrepot, Grille, List[Eleve], List[GroupeVoisins]]:
    """Monte un entrepôt mémoire éphémère à partir d'une charge utile complète."""
    if "layout" not in payload or "students" not in payload:
        raise DonneesInvalides("Les clés « layout » et « students » sont obligatoires")
    entrepot: Entrepot = Entrepot.en_memoire()
    grille: Grille = grille_depuis_payload(entrepot, payload["layout"])
    eleves: List[Eleve] = eleves_depuis_payload(entrepot, payload["students"])
    groupes: List[GroupeVoisins] = groupes_depuis_payload(entrepot, payload.get("groups") or [], grille.id)
    return entrepot, grille, eleves, groupes
