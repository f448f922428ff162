"""
Règles de mixité par rangée et résolveur associé.

Chaque règle est enregistrée dans le registre sous sa `PolitiqueContrainte`.
Seuls les sièges de type normal participent ; les sièges spéciaux sont
ignorés par toute la logique de contrainte.
"""
from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..melange import pile_ou_face
from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.grille import sieges_par_rangee
from ..modele.siege import Siege
from .base import RegleRangee, Reservoirs, ResultatContrainte, Violation
from .registre import enregistrer, regle_de
from .types import PolitiqueContrainte

logger = logging.getLogger(__name__)

SEUIL_MIXITE_BAS: float = 0.4
SEUIL_MIXITE_HAUT: float = 0.6


@enregistrer(PolitiqueContrainte.MIXTE)
class RegleMixte(RegleRangee):
    """Rangée de 2 : exactement 1 garçon + 1 fille. Rangée de 3 : au moins un de chaque.

    Autres tailles : alternance en commençant par un garçon, en se rabattant
    sur le genre restant quand l'un des deux réservoirs est vide.
    """

    def politique(self) -> PolitiqueContrainte:
        return PolitiqueContrainte.MIXTE

    def prealable(self, reservoirs: Reservoirs, avertissements: List[str]) -> bool:
        if not reservoirs.garcons or not reservoirs.filles:
            avertissements.append("Pas assez d'élèves des deux genres pour la contrainte de mixité")
            return False
        return True

    def remplir_rangee(
            self,
            rangee: int,
            sieges: Sequence[Siege],
            reservoirs: Reservoirs,
            avertissements: List[str],
    ) -> List[Affectation]:
        garcons, filles = reservoirs.garcons, reservoirs.filles
        out: List[Affectation] = []
        n: int = len(sieges)

        if n == 2:
            if garcons and filles:
                out.append(Affectation(sieges[0].id, garcons.popleft().id))
                out.append(Affectation(sieges[1].id, filles.popleft().id))
            else:
                avertissements.append(f"Rangée {rangee} : pas assez d'élèves des deux genres")
            return out

        if n == 3:
            if garcons and filles:
                out.append(Affectation(sieges[0].id, garcons.popleft().id))
                out.append(Affectation(sieges[1].id, filles.popleft().id))
                # troisième siège : le réservoir le mieux garni, égalité au profit des garçons
                if garcons and len(garcons) >= len(filles):
                    out.append(Affectation(sieges[2].id, garcons.popleft().id))
                elif filles:
                    out.append(Affectation(sieges[2].id, filles.popleft().id))
            else:
                avertissements.append(f"Rangée {rangee} : pas assez d'élèves pour la contrainte de mixité")
            return out

        i: int
        for i in range(min(n, reservoirs.total())):
            if i % 2 == 0 and garcons:
                out.append(Affectation(sieges[i].id, garcons.popleft().id))
            elif filles:
                out.append(Affectation(sieges[i].id, filles.popleft().id))
            elif garcons:
                out.append(Affectation(sieges[i].id, garcons.popleft().id))
        return out

    def violation(self, rangee: int, sieges: Sequence[Siege], nb_garcons: int, nb_filles: int) -> Optional[str]:
        if len(sieges) == 2 and (nb_garcons != 1 or nb_filles != 1):
            return (
                f"Rangée {rangee} : 1 garçon et 1 fille attendus, "
                f"{nb_garcons} garçon(s) et {nb_filles} fille(s) constatés"
            )
        if len(sieges) == 3 and (nb_garcons == 0 or nb_filles == 0):
            return f"Rangée {rangee} : au moins 1 garçon et 1 fille attendus"
        return None

    def peut_satisfaire(self, nb_garcons: int, nb_filles: int, nb_sieges: int) -> bool:
        return nb_garcons > 0 and nb_filles > 0


@enregistrer(PolitiqueContrainte.MEME_GENRE)
class RegleMemeGenre(RegleRangee):
    """Chaque rangée reçoit un seul genre, tiré à pile ou face.

    Si le réservoir tiré s'épuise, les sièges restants de la rangée restent
    vides pour ce résolveur : on ne bascule jamais sur l'autre genre.
    """

    def politique(self) -> PolitiqueContrainte:
        return PolitiqueContrainte.MEME_GENRE

    def remplir_rangee(
            self,
            rangee: int,
            sieges: Sequence[Siege],
            reservoirs: Reservoirs,
            avertissements: List[str],
    ) -> List[Affectation]:
        reservoir = reservoirs.garcons if pile_ou_face(reservoirs.rng) else reservoirs.filles
        nombre: int = min(len(sieges), len(reservoir))
        if nombre < len(sieges):
            avertissements.append(f"Rangée {rangee} : {len(sieges) - nombre} siège(s) laissé(s) libre(s)")
        return [Affectation(sieges[i].id, reservoir.popleft().id) for i in range(nombre)]

    def violation(self, rangee: int, sieges: Sequence[Siege], nb_garcons: int, nb_filles: int) -> Optional[str]:
        if nb_garcons > 0 and nb_filles > 0:
            return f"Rangée {rangee} : tous les élèves devraient être du même genre"
        return None

    def peut_satisfaire(self, nb_garcons: int, nb_filles: int, nb_sieges: int) -> bool:
        return max(nb_garcons, nb_filles) >= nb_sieges / 2


class ResolveurGenre:
    """Applique une politique de mixité et contrôle a posteriori son respect.

    Le résolveur ne garde aucun état entre deux appels : les réservoirs sont
    recréés à chaque `appliquer`.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng: Optional[random.Random] = rng

    def appliquer(
            self,
            sieges: Iterable[Siege],
            eleves: Sequence[Eleve],
            politique: PolitiqueContrainte,
    ) -> ResultatContrainte:
        """Produit les affectations siège -> élève satisfaisant `politique` rangée par rangée.

        Les élèves sont consommés dans l'ordre fourni. Une rangée infaisable
        est laissée vide et signalée dans les avertissements.
        """
        resultat = ResultatContrainte()
        regle: Optional[RegleRangee] = regle_de(politique)
        if regle is None:
            return resultat

        reservoirs: Reservoirs = Reservoirs.depuis_eleves(eleves, self._rng)
        if regle.prealable(reservoirs, resultat.avertissements):
            for rangee, ligne in sieges_par_rangee(s for s in sieges if s.est_normal()).items():
                resultat.affectations.extend(
                    regle.remplir_rangee(rangee, ligne, reservoirs, resultat.avertissements)
                )

        for message in resultat.avertissements:
            logger.warning("%s: %s", regle.politique().value, message)
        return resultat

    def violations(
            self,
            affectations: Iterable[Affectation],
            eleves: Iterable[Eleve],
            sieges: Iterable[Siege],
            politique: PolitiqueContrainte,
    ) -> List[Violation]:
        """Liste les rangées (d'au moins 2 sièges normaux) qui enfreignent `politique`."""
        regle: Optional[RegleRangee] = regle_de(politique)
        if regle is None:
            return []

        par_id: Dict[str, Eleve] = {e.id: e for e in eleves if e.id is not None}
        occupant: Mapping[str, str] = {a.siege_id: a.eleve_id for a in affectations}

        out: List[Violation] = []
        for rangee, ligne in sieges_par_rangee(s for s in sieges if s.est_normal()).items():
            if len(ligne) < 2:
                continue
            presents: List[Eleve] = [
                par_id[occupant[s.id]] for s in ligne if s.id in occupant and occupant[s.id] in par_id
            ]
            nb_garcons: int = sum(1 for e in presents if e.est_garcon())
            nb_filles: int = sum(1 for e in presents if e.est_fille())
            message: Optional[str] = regle.violation(rangee, ligne, nb_garcons, nb_filles)
            if message is not None:
                out.append(Violation(siege_id=ligne[0].id, politique=regle.politique(), description=message))
        return out

    def verifier(
            self,
            affectations: Iterable[Affectation],
            eleves: Iterable[Eleve],
            sieges: Iterable[Siege],
            politique: PolitiqueContrainte,
    ) -> bool:
        """`True` si aucune violation n'est relevée."""
        return not self.violations(affectations, eleves, sieges, politique)

    @staticmethod
    def peut_satisfaire(eleves: Iterable[Eleve], sieges: Iterable[Siege], politique: PolitiqueContrainte) -> bool:
        regle: Optional[RegleRangee] = regle_de(politique)
        if regle is None:
            return True
        eleves = list(eleves)
        nb_garcons: int = sum(1 for e in eleves if e.est_garcon())
        nb_filles: int = sum(1 for e in eleves if e.est_fille())
        nb_sieges: int = sum(1 for s in sieges if s.est_normal())
        return regle.peut_satisfaire(nb_garcons, nb_filles, nb_sieges)

    @staticmethod
    def recommander(eleves: Iterable[Eleve]) -> PolitiqueContrainte:
        """Mixité si la part de garçons est dans [0.4, 0.6], sinon remplissage aléatoire simple."""
        eleves = list(eleves)
        if not eleves:
            return PolitiqueContrainte.AUCUNE
        part_garcons: float = sum(1 for e in eleves if e.est_garcon()) / len(eleves)
        if SEUIL_MIXITE_BAS <= part_garcons <= SEUIL_MIXITE_HAUT:
            return PolitiqueContrainte.MIXTE
        return PolitiqueContrainte.AUCUNE
