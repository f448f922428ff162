from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Iterable, List, Optional, Sequence

from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.siege import Siege
from .types import PolitiqueContrainte


@dataclass
class Reservoirs:
    """Files de garçons et de filles consommées par tête pendant UNE résolution.

    Les files appartiennent à l'appel de résolution qui les a construites ;
    l'ordre de consommation est l'ordre fourni (à mélanger en amont si l'on
    veut de l'équité).
    """

    garcons: Deque[Eleve] = field(default_factory=deque)
    filles: Deque[Eleve] = field(default_factory=deque)
    rng: Optional[random.Random] = None

    @classmethod
    def depuis_eleves(cls, eleves: Iterable[Eleve], rng: Optional[random.Random] = None) -> "Reservoirs":
        eleves = list(eleves)
        return cls(
            garcons=deque(e for e in eleves if e.est_garcon()),
            filles=deque(e for e in eleves if e.est_fille()),
            rng=rng,
        )

    def total(self) -> int:
        return len(self.garcons) + len(self.filles)


@dataclass(frozen=True)
class Violation:
    """Rangée qui ne respecte pas la politique active."""

    siege_id: str
    politique: PolitiqueContrainte
    description: str

    def vers_dict(self) -> Dict[str, Any]:
        return {"seatId": self.siege_id, "type": self.politique.value, "description": self.description}


class RegleRangee(ABC):
    """Classe de base des règles de mixité appliquées rangée par rangée.

    Méthodes à implémenter
    ----------------------
    - `politique()` : membre de `PolitiqueContrainte` couvert par la règle.
    - `remplir_rangee(...)` : affecte des élèves aux sièges normaux d'une rangée.
    - `violation(...)` : décrit l'écart d'une rangée déjà remplie, ou `None`.
    - `peut_satisfaire(...)` : pré-contrôle de faisabilité.
    """

    @abstractmethod
    def politique(self) -> PolitiqueContrainte:
        raise NotImplementedError

    def prealable(self, reservoirs: Reservoirs, avertissements: List[str]) -> bool:
        """Contrôle global avant toute rangée ; `False` annule la résolution."""
        return True

    @abstractmethod
    def remplir_rangee(
            self,
            rangee: int,
            sieges: Sequence[Siege],
            reservoirs: Reservoirs,
            avertissements: List[str],
    ) -> List[Affectation]:
        raise NotImplementedError

    @abstractmethod
    def violation(self, rangee: int, sieges: Sequence[Siege], nb_garcons: int, nb_filles: int) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def peut_satisfaire(self, nb_garcons: int, nb_filles: int, nb_sieges: int) -> bool:
        raise NotImplementedError


@dataclass
class ResultatContrainte:
    """Affectations produites par un résolveur, plus les avertissements accumulés."""

    affectations: List[Affectation] = field(default_factory=list)
    avertissements: List[str] = field(default_factory=list)
