from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..modele.affectation import EnregistrementPlacement
from ..modele.eleve import Eleve
from ..modele.grille import Grille
from ..modele.groupe import GroupeVoisins
from .base import Depot
from .cache import DepotCache
from .memoire import DepotMemoire


@dataclass
class Entrepot:
    """Les quatre collections du placement, construites une fois et injectées dans les services."""

    eleves: Depot[Eleve]
    grilles: Depot[Grille]
    enregistrements: Depot[EnregistrementPlacement]
    groupes: Depot[GroupeVoisins]

    @classmethod
    def en_memoire(cls) -> "Entrepot":
        return cls(
            eleves=DepotMemoire("eleves"),
            grilles=DepotMemoire("grilles"),
            enregistrements=DepotMemoire("enregistrements"),
            groupes=DepotMemoire("groupes"),
        )

    @classmethod
    def en_cache(cls, ttl: Optional[int] = None) -> "Entrepot":
        return cls(
            eleves=DepotCache("eleves", Eleve.vers_dict, Eleve.depuis_dict, ttl),
            grilles=DepotCache("grilles", Grille.vers_dict, Grille.depuis_dict, ttl),
            enregistrements=DepotCache(
                "enregistrements", EnregistrementPlacement.vers_dict, EnregistrementPlacement.depuis_dict, ttl
            ),
            groupes=DepotCache("groupes", GroupeVoisins.vers_dict, GroupeVoisins.depuis_dict, ttl),
        )
