from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import Depot, T, horodater_insertion, horodater_modification


class DepotMemoire(Depot[T]):
    """Dépôt en mémoire de processus (tests, CLI, tâche Celery isolée)."""

    def __init__(self, collection: str) -> None:
        super().__init__(collection)
        self._donnees: Dict[str, T] = {}

    def inserer(self, entite: T) -> T:
        entite = horodater_insertion(entite)
        if entite.id in self._donnees:
            raise self._doublon(entite.id)
        self._donnees[entite.id] = entite
        return entite

    def tous(self) -> List[T]:
        return list(self._donnees.values())

    def par_id(self, identifiant: str) -> Optional[T]:
        return self._donnees.get(identifiant)

    def mettre_a_jour(self, identifiant: str, **changements: Any) -> bool:
        actuelle: Optional[T] = self._donnees.get(identifiant)
        if actuelle is None:
            return False
        self._donnees[identifiant] = horodater_modification(actuelle, changements)
        return True

    def supprimer(self, identifiant: str) -> bool:
        return self._donnees.pop(identifiant, None) is not None

    def compter(self) -> int:
        return len(self._donnees)
