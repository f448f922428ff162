from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Set

from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.siege import Siege


class ResultatResolution:
    """Résultat d'un remplissage.

    Attributs
    ---------
    affectations : list[Affectation]
        Affectations siège -> élève produites (bijection partielle).
    avertissements : list[str]
        Infaisabilités rencontrées (rangée ignorée, groupe sans bloc, surplus...).
    non_places : list[str]
        Identifiants des élèves restés sans siège.
    sieges_libres : list[str]
        Identifiants des sièges normaux restés vides.
    """

    def __init__(
            self,
            affectations: List[Affectation],
            avertissements: Optional[List[str]] = None,
            non_places: Optional[List[str]] = None,
            sieges_libres: Optional[List[str]] = None,
    ) -> None:
        self.affectations: List[Affectation] = affectations
        self.avertissements: List[str] = avertissements or []
        self.non_places: List[str] = non_places or []
        self.sieges_libres: List[str] = sieges_libres or []


class Solveur(ABC):
    """Interface des stratégies de remplissage (aléatoire, sous contraintes)."""

    @abstractmethod
    def resoudre(self, sieges: Sequence[Siege], eleves: Sequence[Eleve]) -> ResultatResolution:
        """Affecte des élèves aux sièges normaux de `sieges`."""
        raise NotImplementedError

    @staticmethod
    def valider_final(affectations: Iterable[Affectation], eleves: Iterable[Eleve]) -> bool:
        """Vérification consultative : aucun élève en double, tous présents dans l'effectif."""
        connus: Set[Optional[str]] = {e.id for e in eleves}
        vus: Set[str] = set()
        for a in affectations:
            if a.eleve_id in vus or a.eleve_id not in connus:
                return False
            vus.add(a.eleve_id)
        return True

    @staticmethod
    def bilan(
            affectations: List[Affectation],
            sieges: Sequence[Siege],
            eleves: Sequence[Eleve],
            avertissements: List[str],
    ) -> ResultatResolution:
        """Complète un résultat avec les élèves non placés et les sièges normaux libres."""
        places: Set[str] = {a.eleve_id for a in affectations}
        occupes: Set[str] = {a.siege_id for a in affectations}
        non_places: List[str] = [e.id for e in eleves if e.id not in places]
        libres: List[str] = [s.id for s in sieges if s.est_normal() and s.id not in occupes]
        return ResultatResolution(affectations, avertissements, non_places, libres)
