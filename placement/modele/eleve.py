from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .validation import date_vers_texte, lire_booleen, texte_vers_date


class Genre(str, Enum):
    """Genre d'un élève, tel que l'utilisent les règles de mixité."""

    MASCULIN = "male"
    FEMININ = "female"


@dataclass(frozen=True)
class Eleve:
    """Modélise un élève plaçable.

    Attributs
    ---------
    nom : str
        Nom affiché, unique dans l'effectif (vérifié à la création).
    genre : Genre
        Genre, utilisé par les politiques de mixité.
    besoins_particuliers : bool
        Élève placé en priorité lors d'un remplissage aléatoire.
    siege_prefere_id : Optional[str]
        Siège souhaité, honoré s'il est encore libre.
    groupe_id : Optional[str]
        Groupe de voisins auquel l'élève appartient.

    Les champs `contact`, `niveau`, `classe` et `notes` sont purement
    informatifs ; `id`, `cree_le` et `modifie_le` sont posés par le dépôt.
    """

    nom: str
    genre: Genre
    besoins_particuliers: bool = False
    siege_prefere_id: Optional[str] = None
    groupe_id: Optional[str] = None
    contact: Optional[str] = None
    niveau: Optional[str] = None
    classe: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None
    cree_le: Optional[datetime] = None
    modifie_le: Optional[datetime] = None

    def __post_init__(self) -> None:
        # dataclass figée : normalisation via object.__setattr__
        object.__setattr__(self, "nom", self.nom.strip())
        object.__setattr__(self, "genre", Genre(self.genre))

    def est_garcon(self) -> bool:
        return self.genre is Genre.MASCULIN

    def est_fille(self) -> bool:
        return self.genre is Genre.FEMININ

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.nom,
            "gender": self.genre.value,
            "specialNeeds": self.besoins_particuliers,
            "preferredSeatId": self.siege_prefere_id,
            "groupId": self.groupe_id,
            "contact": self.contact,
            "grade": self.niveau,
            "className": self.classe,
            "notes": self.notes,
            "createdAt": date_vers_texte(self.cree_le),
            "updatedAt": date_vers_texte(self.modifie_le),
        }

    @classmethod
    def depuis_dict(cls, d: Dict[str, Any]) -> "Eleve":
        return cls(
            nom=str(d["name"]),
            genre=Genre(d["gender"]),
            besoins_particuliers=lire_booleen(d.get("specialNeeds", False)),
            siege_prefere_id=d.get("preferredSeatId"),
            groupe_id=d.get("groupId"),
            contact=d.get("contact"),
            niveau=d.get("grade"),
            classe=d.get("className"),
            notes=d.get("notes"),
            id=None if d.get("id") is None else str(d["id"]),
            cree_le=texte_vers_date(d.get("createdAt")),
            modifie_le=texte_vers_date(d.get("updatedAt")),
        )

    def __str__(self) -> str:  # pragma: no cover - représentation
        return f"{self.nom} ({self.genre.value})"
