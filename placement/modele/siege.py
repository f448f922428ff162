from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

_MOTIF_ID = re.compile(r"^siege_(\d+)_(\d+)$")


class TypeSiege(str, Enum):
    """Nature d'un siège : seuls les sièges normaux sont remplis automatiquement."""

    NORMAL = "normal"
    SPECIAL = "special"


class ModeNumerotation(str, Enum):
    """Mode de numérotation affichée des sièges d'une grille."""

    SEQUENTIEL = "sequential"
    COORDONNEES = "coordinate"


def identifiant_siege(rangee: int, colonne: int) -> str:
    """Identifiant stable d'un siège, dérivé uniquement de (rangée, colonne)."""
    return f"siege_{rangee}_{colonne}"


def position_depuis_identifiant(siege_id: str) -> Optional[Tuple[int, int]]:
    """Retrouve (rangée, colonne) depuis un identifiant produit par `identifiant_siege`."""
    m = _MOTIF_ID.match(siege_id)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


@dataclass(frozen=True)
class Siege:
    """Représente une place précise de la grille.

    Attributs
    ---------
    id : str
        Identifiant stable (voir `identifiant_siege`).
    rangee : int
        Indice de rangée, 0-indexé, 0 = premier rang.
    colonne : int
        Indice de colonne, 0-indexé, de gauche à droite.
    type : TypeSiege
        `normal` (remplissable) ou `special` (exclu du remplissage automatique).
    numero : Optional[str]
        Numéro affiché (mode séquentiel uniquement).

    Immuable : un siège ne change jamais d'identité ; seul son type peut être
    basculé, ce qui produit une nouvelle instance.
    """

    id: str
    rangee: int
    colonne: int
    type: TypeSiege = TypeSiege.NORMAL
    numero: Optional[str] = None

    def est_normal(self) -> bool:
        return self.type is TypeSiege.NORMAL

    def position(self) -> Tuple[int, int]:
        """Retourne la paire (rangée, colonne)."""
        return self.rangee, self.colonne

    def avec_type(self, type_siege: TypeSiege) -> "Siege":
        return replace(self, type=TypeSiege(type_siege))

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "row": self.rangee,
            "col": self.colonne,
            "kind": self.type.value,
            "displayNumber": self.numero,
        }

    @classmethod
    def depuis_dict(cls, d: Dict[str, Any]) -> "Siege":
        rangee: int = int(d["row"])
        colonne: int = int(d["col"])
        return cls(
            id=str(d.get("id") or identifiant_siege(rangee, colonne)),
            rangee=rangee,
            colonne=colonne,
            type=TypeSiege(d.get("kind", TypeSiege.NORMAL.value)),
            numero=d.get("displayNumber"),
        )
