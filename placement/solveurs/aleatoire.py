from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from .base import ResultatResolution, Solveur
from ..melange import melanger, tirer_indice
from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.siege import Siege

logger = logging.getLogger(__name__)


class SolveurAleatoire(Solveur):
    """Remplissage aléatoire en une passe.

    Étapes
    ------
    1. Seuls les sièges de type normal sont considérés.
    2. Les élèves à besoins particuliers passent d'abord : siège préféré s'il
       est encore libre, sinon un siège tiré uniformément parmi les restants.
    3. Les autres élèves sont mélangés puis appariés aux sièges restants dans
       l'ordre ; le surplus d'un côté ou de l'autre reste non affecté.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng: Optional[random.Random] = rng

    def resoudre(self, sieges: Sequence[Siege], eleves: Sequence[Eleve]) -> ResultatResolution:
        restants: List[Siege] = [s for s in sieges if s.est_normal()]
        avertissements: List[str] = []
        if len(eleves) > len(restants):
            message = f"Plus d'élèves ({len(eleves)}) que de sièges ({len(restants)}) : certains resteront sans place"
            logger.warning(message)
            avertissements.append(message)

        affectations: List[Affectation] = self.placer_besoins_particuliers(restants, eleves)
        ordinaires: List[Eleve] = [e for e in eleves if not e.besoins_particuliers]
        affectations.extend(self.apparier(restants, ordinaires))
        return self.bilan(affectations, sieges, eleves, avertissements)

    def placer_besoins_particuliers(self, restants: List[Siege], eleves: Sequence[Eleve]) -> List[Affectation]:
        """Place les élèves à besoins particuliers ; `restants` est consommé en place."""
        out: List[Affectation] = []
        for e in eleves:
            if not e.besoins_particuliers:
                continue
            if not restants:
                break
            indice: Optional[int] = None
            if e.siege_prefere_id:
                indice = next((i for i, s in enumerate(restants) if s.id == e.siege_prefere_id), None)
            if indice is None:
                indice = tirer_indice(len(restants), self._rng)
            siege: Siege = restants.pop(indice)
            out.append(Affectation(siege.id, e.id))
        return out

    def apparier(self, restants: List[Siege], eleves: Sequence[Eleve]) -> List[Affectation]:
        """Mélange `eleves` et les associe un à un aux premiers sièges de `restants` (consommés)."""
        melanges: List[Eleve] = melanger(eleves, self._rng)
        nombre: int = min(len(melanges), len(restants))
        out: List[Affectation] = [Affectation(restants[i].id, melanges[i].id) for i in range(nombre)]
        del restants[:nombre]
        return out
