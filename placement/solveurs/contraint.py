from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Set

from .aleatoire import SolveurAleatoire
from .base import ResultatResolution
from ..contraintes.base import ResultatContrainte
from ..contraintes.genre import ResolveurGenre
from ..contraintes.types import PolitiqueContrainte
from ..contraintes.voisins import placer_groupes
from ..melange import melanger
from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.groupe import GroupeVoisins
from ..modele.siege import Siege

logger = logging.getLogger(__name__)


class SolveurContraint(SolveurAleatoire):
    """
    Remplissage en phases successives, chacune se servant dans ce que la
    précédente a laissé :

    1. groupes de voisins, dans l'ordre fourni, sur des blocs contigus ;
    2. élèves à besoins particuliers (siège préféré, sinon tirage) ;
    3. politique de mixité sur les élèves ordinaires restants (réservoirs mélangés) ;
    4. remplissage aléatoire de tout ce qui reste.
    """

    def __init__(
            self,
            groupes: Optional[Sequence[GroupeVoisins]] = None,
            politique: PolitiqueContrainte = PolitiqueContrainte.AUCUNE,
            rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(rng)
        self.groupes: List[GroupeVoisins] = list(groupes or [])
        self.politique: PolitiqueContrainte = PolitiqueContrainte(politique)

    def resoudre(self, sieges: Sequence[Siege], eleves: Sequence[Eleve]) -> ResultatResolution:
        restants: List[Siege] = [s for s in sieges if s.est_normal()]
        avertissements: List[str] = []
        affectations: List[Affectation] = []

        if len(eleves) > len(restants):
            message = f"Plus d'élèves ({len(eleves)}) que de sièges ({len(restants)}) : certains resteront sans place"
            logger.warning(message)
            avertissements.append(message)

        # 1. groupes
        if self.groupes:
            connus: Set[str] = {e.id for e in eleves}
            res_groupes, restants = placer_groupes(restants, self.groupes, connus)
            affectations.extend(res_groupes.affectations)
            avertissements.extend(res_groupes.avertissements)

        places: Set[str] = {a.eleve_id for a in affectations}
        libres: List[Eleve] = [e for e in eleves if e.id not in places]

        # 2. besoins particuliers
        affectations.extend(self.placer_besoins_particuliers(restants, libres))
        places = {a.eleve_id for a in affectations}
        ordinaires: List[Eleve] = [e for e in libres if e.id not in places]

        # 3. mixité
        if self.politique is not PolitiqueContrainte.AUCUNE and ordinaires:
            res_genre: ResultatContrainte = ResolveurGenre(self._rng).appliquer(
                restants, melanger(ordinaires, self._rng), self.politique
            )
            affectations.extend(res_genre.affectations)
            avertissements.extend(res_genre.avertissements)
            pris: Set[str] = {a.siege_id for a in res_genre.affectations}
            deja: Set[str] = {a.eleve_id for a in res_genre.affectations}
            restants = [s for s in restants if s.id not in pris]
            ordinaires = [e for e in ordinaires if e.id not in deja]

        # 4. reste
        affectations.extend(self.apparier(restants, ordinaires))

        return self.bilan(affectations, sieges, eleves, avertissements)
