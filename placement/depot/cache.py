"""
Dépôt adossé au cache Django (Redis via django-redis en production).

Chaque entité est stockée sous forme de dict JSON-compatible à la clé
`pl:{collection}:{id}` ; la clé `pl:{collection}:index` liste les
identifiants dans l'ordre d'insertion.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from django.core.cache import cache

from ..reglages import reglage
from .base import Depot, T, horodater_insertion, horodater_modification

logger = logging.getLogger(__name__)


class DepotCache(Depot[T]):
    def __init__(
            self,
            collection: str,
            vers_dict: Callable[[T], Dict[str, Any]],
            depuis_dict: Callable[[Dict[str, Any]], T],
            ttl: Optional[int] = None,
    ) -> None:
        super().__init__(collection)
        self._vers_dict = vers_dict
        self._depuis_dict = depuis_dict
        self._ttl: Optional[int] = ttl if ttl is not None else reglage("PLACEMENT_DEPOT_TTL")

    def _cle(self, identifiant: str) -> str:
        return f"pl:{self.collection}:{identifiant}"

    @property
    def _cle_index(self) -> str:
        return f"pl:{self.collection}:index"

    def _index(self) -> List[str]:
        return list(cache.get(self._cle_index) or [])

    def _ecrire(self, entite: T) -> None:
        cache.set(self._cle(entite.id), self._vers_dict(entite), timeout=self._ttl)

    def inserer(self, entite: T) -> T:
        entite = horodater_insertion(entite)
        index: List[str] = self._index()
        if entite.id in index and cache.get(self._cle(entite.id)) is not None:
            raise self._doublon(entite.id)
        self._ecrire(entite)
        if entite.id not in index:
            index.append(entite.id)
            cache.set(self._cle_index, index, timeout=self._ttl)
        return entite

    def tous(self) -> List[T]:
        index: List[str] = self._index()
        if not index:
            return []
        trouves: Dict[str, Any] = cache.get_many([self._cle(i) for i in index])
        out: List[T] = []
        for i in index:
            brut: Optional[Dict[str, Any]] = trouves.get(self._cle(i))
            if brut is None:
                # entrée expirée ou évincée : l'index sera nettoyé à la prochaine suppression
                logger.debug("%s: entrée %s absente du cache", self.collection, i)
                continue
            out.append(self._depuis_dict(brut))
        return out

    def par_id(self, identifiant: str) -> Optional[T]:
        brut: Optional[Dict[str, Any]] = cache.get(self._cle(identifiant))
        return None if brut is None else self._depuis_dict(brut)

    def mettre_a_jour(self, identifiant: str, **changements: Any) -> bool:
        actuelle: Optional[T] = self.par_id(identifiant)
        if actuelle is None:
            return False
        self._ecrire(horodater_modification(actuelle, changements))
        return True

    def supprimer(self, identifiant: str) -> bool:
        present: bool = cache.get(self._cle(identifiant)) is not None
        cache.delete(self._cle(identifiant))
        index: List[str] = [i for i in self._index() if i != identifiant and cache.get(self._cle(i)) is not None]
        cache.set(self._cle_index, index, timeout=self._ttl)
        return present
