from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .validation import date_vers_texte, texte_vers_date

TAILLE_MIN_GROUPE: int = 2
TAILLE_MAX_GROUPE: int = 4


@dataclass(frozen=True)
class GroupeVoisins:
    """Groupe de 2 à 4 élèves devant occuper un bloc de sièges contigus.

    L'ordre de `eleves_ids` est l'ordre d'attribution des sièges du bloc.
    """

    eleves_ids: Tuple[str, ...]
    nom: str = ""
    grille_id: Optional[str] = None
    id: Optional[str] = None
    cree_le: Optional[datetime] = None
    modifie_le: Optional[datetime] = None

    def taille(self) -> int:
        return len(self.eleves_ids)

    def contient(self, eleve_id: str) -> bool:
        return eleve_id in self.eleves_ids

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.nom,
            "studentIds": list(self.eleves_ids),
            "layoutId": self.grille_id,
            "createdAt": date_vers_texte(self.cree_le),
            "updatedAt": date_vers_texte(self.modifie_le),
        }

    @classmethod
    def depuis_dict(cls, d: Dict[str, Any]) -> "GroupeVoisins":
        return cls(
            eleves_ids=tuple(str(i) for i in d.get("studentIds", [])),
            nom=str(d.get("name") or ""),
            grille_id=d.get("layoutId"),
            id=None if d.get("id") is None else str(d["id"]),
            cree_le=texte_vers_date(d.get("createdAt")),
            modifie_le=texte_vers_date(d.get("updatedAt")),
        )
