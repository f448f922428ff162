from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..contraintes.types import PolitiqueContrainte
from .validation import date_vers_texte, texte_vers_date


class StrategieRemplissage(str, Enum):
    """Mode global d'une opération de remplissage."""

    ALEATOIRE = "random"
    MANUELLE = "manual"
    MIXTE = "mixed"


@dataclass(frozen=True)
class Affectation:
    """Un siège occupé par un élève."""

    siege_id: str
    eleve_id: str

    def vers_dict(self) -> Dict[str, str]:
        return {"seatId": self.siege_id, "studentId": self.eleve_id}

    @classmethod
    def depuis_dict(cls, d: Mapping[str, Any]) -> "Affectation":
        return cls(siege_id=str(d["seatId"]), eleve_id=str(d["studentId"]))


def affectations_depuis_correspondance(correspondance: Mapping[str, Any]) -> List[Affectation]:
    """Convertit un mapping {siege_id: eleve_id} en liste d'affectations (ordre conservé)."""
    return [Affectation(siege_id=str(s), eleve_id=str(e)) for s, e in correspondance.items()]


def doublons(affectations: Iterable[Affectation]) -> Tuple[List[str], List[str]]:
    """Retourne (sièges en double, élèves en double), dans l'ordre d'apparition."""
    vus_sieges: set[str] = set()
    vus_eleves: set[str] = set()
    sieges_doubles: List[str] = []
    eleves_doubles: List[str] = []
    for a in affectations:
        if a.siege_id in vus_sieges:
            sieges_doubles.append(a.siege_id)
        if a.eleve_id in vus_eleves:
            eleves_doubles.append(a.eleve_id)
        vus_sieges.add(a.siege_id)
        vus_eleves.add(a.eleve_id)
    return sieges_doubles, eleves_doubles


@dataclass(frozen=True)
class EnregistrementPlacement:
    """Instantané immuable produit par un remplissage.

    L'historique d'une grille ne fait que s'allonger : un nouveau remplissage
    crée un nouvel enregistrement, le plus récent étant l'état « courant ».
    """

    grille_id: str
    strategie: StrategieRemplissage
    politique: PolitiqueContrainte = PolitiqueContrainte.AUCUNE
    affectations: Tuple[Affectation, ...] = field(default_factory=tuple)
    id: Optional[str] = None
    cree_le: Optional[datetime] = None

    def correspondance(self) -> Dict[str, str]:
        """{siege_id: eleve_id}"""
        return {a.siege_id: a.eleve_id for a in self.affectations}

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "layoutId": self.grille_id,
            "strategy": self.strategie.value,
            "constraintPolicy": self.politique.value,
            "assignments": [a.vers_dict() for a in self.affectations],
            "createdAt": date_vers_texte(self.cree_le),
        }

    @classmethod
    def depuis_dict(cls, d: Mapping[str, Any]) -> "EnregistrementPlacement":
        return cls(
            grille_id=str(d["layoutId"]),
            strategie=StrategieRemplissage(d["strategy"]),
            politique=PolitiqueContrainte(d.get("constraintPolicy")),
            affectations=tuple(Affectation.depuis_dict(a) for a in d.get("assignments", [])),
            id=d.get("id"),
            cree_le=texte_vers_date(d.get("createdAt")),
        )
