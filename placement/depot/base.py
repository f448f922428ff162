from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import Any, Callable, Generic, List, Optional, TypeVar

from ..erreurs import ConflitUnicite

T = TypeVar("T")


def maintenant() -> datetime:
    return datetime.now(timezone.utc)


def nouvel_identifiant() -> str:
    return uuid.uuid4().hex


def _champs(entite: Any) -> set[str]:
    return {f.name for f in fields(entite)}


def horodater_insertion(entite: T) -> T:
    """Pose `id`, `cree_le` et `modifie_le` (quand l'entité les déclare).

    Seuls les champs encore à `None` sont remplis : un identifiant fourni par
    l'appelant est conservé, de même que des horodatages déjà posés.
    """
    champs = _champs(entite)
    instant: datetime = maintenant()
    changements: dict[str, Any] = {}
    if getattr(entite, "id", None) is None:
        changements["id"] = nouvel_identifiant()
    for nom in ("cree_le", "modifie_le"):
        if nom in champs and getattr(entite, nom) is None:
            changements[nom] = instant
    return replace(entite, **changements) if changements else entite


def horodater_modification(entite: T, changements: dict[str, Any]) -> T:
    """Applique `changements` (champs inconnus refusés) et rafraîchit `modifie_le`."""
    champs = _champs(entite)
    inconnus = set(changements) - champs
    if inconnus:
        raise TypeError(f"champs inconnus : {', '.join(sorted(inconnus))}")
    changements = {k: v for k, v in changements.items() if k not in ("id", "cree_le")}
    if "modifie_le" in champs:
        changements["modifie_le"] = maintenant()
    return replace(entite, **changements)


class Depot(ABC, Generic[T]):
    """
    Collection nommée d'entités (dataclasses figées) avec sémantique CRUD.

    Le dépôt attribue l'identifiant et les horodatages à l'insertion. Les
    écritures sur une même entité sont supposées sérialisées par l'appelant.
    """

    def __init__(self, collection: str) -> None:
        self.collection: str = collection

    def _doublon(self, identifiant: str) -> ConflitUnicite:
        return ConflitUnicite(f"{self.collection}: identifiant {identifiant!r} déjà présent")

    @abstractmethod
    def inserer(self, entite: T) -> T:
        raise NotImplementedError

    @abstractmethod
    def tous(self) -> List[T]:
        """Toutes les entités, dans l'ordre d'insertion."""
        raise NotImplementedError

    @abstractmethod
    def par_id(self, identifiant: str) -> Optional[T]:
        raise NotImplementedError

    @abstractmethod
    def mettre_a_jour(self, identifiant: str, **changements: Any) -> bool:
        raise NotImplementedError

    @abstractmethod
    def supprimer(self, identifiant: str) -> bool:
        raise NotImplementedError

    def filtrer(self, predicat: Callable[[T], bool]) -> List[T]:
        return [e for e in self.tous() if predicat(e)]

    def compter(self) -> int:
        return len(self.tous())
