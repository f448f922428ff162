"""
Point d'entrée unique des remplissages : produit un ensemble d'affectations,
le contrôle, puis le fige dans un `EnregistrementPlacement` stocké.
"""
from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from ..contraintes.base import Violation
from ..contraintes.genre import ResolveurGenre
from ..contraintes.types import PolitiqueContrainte
from ..contraintes.voisins import valider_groupes
from ..depot.entrepot import Entrepot
from ..modele.affectation import (
    Affectation,
    EnregistrementPlacement,
    StrategieRemplissage,
    affectations_depuis_correspondance,
)
from ..modele.eleve import Eleve
from ..modele.grille import Grille
from ..modele.groupe import GroupeVoisins
from ..solveurs.base import ResultatResolution, Solveur
from ..solveurs.contraint import SolveurContraint
from .grilles import GestionnaireGrilles

logger = logging.getLogger(__name__)


@dataclass
class ResultatRemplissage:
    """Enregistrement stocké et bilan du remplissage qui l'a produit.

    Attributs
    ---------
    enregistrement : EnregistrementPlacement
        Instantané immuable stocké dans l'historique de la grille.
    avertissements : list[str]
        Infaisabilités rencontrées, dans l'ordre où elles sont apparues.
    non_places : list[str]
        Élèves de l'effectif restés sans siège.
    sieges_libres : list[str]
        Sièges normaux restés vides.
    est_valide : bool
        Aucun élève en double et tous présents dans l'effectif (consultatif).
    violations : list[Violation]
        Rangées qui enfreignent la politique de mixité demandée.
    """

    enregistrement: EnregistrementPlacement
    avertissements: List[str] = field(default_factory=list)
    non_places: List[str] = field(default_factory=list)
    sieges_libres: List[str] = field(default_factory=list)
    est_valide: bool = True
    violations: List[Violation] = field(default_factory=list)

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "record": self.enregistrement.vers_dict(),
            "warnings": list(self.avertissements),
            "unplaced": list(self.non_places),
            "freeSeats": list(self.sieges_libres),
            "valid": self.est_valide,
            "violations": [v.vers_dict() for v in self.violations],
        }


class OrchestrateurRemplissage:
    """Remplit une grille avec l'effectif du dépôt selon une stratégie.

    Un remplissage ne modifie jamais un enregistrement existant : chaque appel
    ajoute un nouvel enregistrement à l'historique de la grille.
    """

    def __init__(self, entrepot: Entrepot, rng: Optional[random.Random] = None) -> None:
        self.entrepot: Entrepot = entrepot
        self.grilles: GestionnaireGrilles = GestionnaireGrilles(entrepot.grilles)
        self._rng: Optional[random.Random] = rng

    # --- stratégies ----------------------------------------------------------

    def remplir(
            self,
            grille_id: str,
            strategie: StrategieRemplissage = StrategieRemplissage.ALEATOIRE,
            politique: PolitiqueContrainte = PolitiqueContrainte.AUCUNE,
            correspondance: Optional[Mapping[str, str]] = None,
            groupes: Optional[Sequence[GroupeVoisins]] = None,
    ) -> ResultatRemplissage:
        strategie = StrategieRemplissage(strategie)
        politique = PolitiqueContrainte(politique)
        if strategie is StrategieRemplissage.MANUELLE:
            return self.remplir_manuel(grille_id, correspondance or {})
        if strategie is StrategieRemplissage.MIXTE:
            return self.remplir_mixte(grille_id, correspondance or {}, politique, groupes)
        return self.remplir_aleatoire(grille_id, politique, groupes)

    def remplir_aleatoire(
            self,
            grille_id: str,
            politique: PolitiqueContrainte = PolitiqueContrainte.AUCUNE,
            groupes: Optional[Sequence[GroupeVoisins]] = None,
    ) -> ResultatRemplissage:
        """Besoins particuliers d'abord, puis groupes et mixité éventuels, puis hasard."""
        grille: Grille = self.grilles.obtenir(grille_id)
        eleves: List[Eleve] = self.entrepot.eleves.tous()
        solveur = SolveurContraint(groupes, politique, self._rng)
        resolution: ResultatResolution = solveur.resoudre(grille.sieges, eleves)
        return self._conclure(
            grille, StrategieRemplissage.ALEATOIRE, politique, resolution.affectations,
            eleves, resolution.avertissements, groupes,
        )

    def remplir_manuel(self, grille_id: str, correspondance: Mapping[str, str]) -> ResultatRemplissage:
        """Enregistre tel quel le mapping {siege_id: eleve_id} fourni ; aucun algorithme."""
        grille: Grille = self.grilles.obtenir(grille_id)
        eleves: List[Eleve] = self.entrepot.eleves.tous()
        avertissements: List[str] = []
        affectations: List[Affectation] = self._filtrer_connues(
            affectations_depuis_correspondance(correspondance), grille, eleves, avertissements
        )
        return self._conclure(
            grille, StrategieRemplissage.MANUELLE, PolitiqueContrainte.AUCUNE, affectations, eleves, avertissements
        )

    def remplir_mixte(
            self,
            grille_id: str,
            correspondance_fixe: Mapping[str, str],
            politique: PolitiqueContrainte = PolitiqueContrainte.AUCUNE,
            groupes: Optional[Sequence[GroupeVoisins]] = None,
    ) -> ResultatRemplissage:
        """Place d'abord le mapping fixe, puis complète au hasard sièges et élèves restants."""
        grille: Grille = self.grilles.obtenir(grille_id)
        eleves: List[Eleve] = self.entrepot.eleves.tous()
        avertissements: List[str] = []
        fixes: List[Affectation] = self._filtrer_connues(
            affectations_depuis_correspondance(correspondance_fixe), grille, eleves, avertissements
        )

        sieges_pris: Set[str] = {a.siege_id for a in fixes}
        eleves_pris: Set[str] = {a.eleve_id for a in fixes}
        groupes_restants: Optional[List[GroupeVoisins]] = None
        if groupes:
            groupes_restants = [g for g in groupes if not any(i in eleves_pris for i in g.eleves_ids)]
        resolution: ResultatResolution = SolveurContraint(groupes_restants, politique, self._rng).resoudre(
            [s for s in grille.sieges if s.id not in sieges_pris],
            [e for e in eleves if e.id not in eleves_pris],
        )
        avertissements.extend(resolution.avertissements)
        return self._conclure(
            grille, StrategieRemplissage.MIXTE, politique, fixes + resolution.affectations,
            eleves, avertissements, groupes_restants,
        )

    # --- contrôle et persistance ---------------------------------------------

    @staticmethod
    def valider_resultat(affectations: Iterable[Affectation], eleves: Iterable[Eleve]) -> bool:
        return Solveur.valider_final(affectations, eleves)

    @staticmethod
    def _filtrer_connues(
            affectations: List[Affectation],
            grille: Grille,
            eleves: Sequence[Eleve],
            avertissements: List[str],
    ) -> List[Affectation]:
        sieges_connus: Set[str] = {s.id for s in grille.sieges}
        eleves_connus: Set[Optional[str]] = {e.id for e in eleves}
        gardees: List[Affectation] = []
        for a in affectations:
            if a.siege_id not in sieges_connus:
                avertissements.append(f"Siège inconnu ignoré : {a.siege_id}")
            elif a.eleve_id not in eleves_connus:
                avertissements.append(f"Élève inconnu ignoré : {a.eleve_id}")
            else:
                gardees.append(a)
        return gardees

    def _conclure(
            self,
            grille: Grille,
            strategie: StrategieRemplissage,
            politique: PolitiqueContrainte,
            affectations: List[Affectation],
            eleves: Sequence[Eleve],
            avertissements: List[str],
            groupes: Optional[Sequence[GroupeVoisins]] = None,
    ) -> ResultatRemplissage:
        bilan: ResultatResolution = Solveur.bilan(affectations, grille.sieges, eleves, avertissements)
        est_valide: bool = self.valider_resultat(affectations, eleves)
        if not est_valide:
            logger.warning("grille %s : affectations incohérentes (élève en double ou inconnu)", grille.id)

        violations: List[Violation] = ResolveurGenre().violations(affectations, eleves, grille.sieges, politique)
        if groupes:
            controle = valider_groupes(affectations, groupes, grille.sieges)
            bilan.avertissements.extend(controle.erreurs)

        enregistrement: EnregistrementPlacement = self.entrepot.enregistrements.inserer(
            EnregistrementPlacement(
                grille_id=grille.id,
                strategie=strategie,
                politique=politique,
                affectations=tuple(affectations),
            )
        )
        logger.info(
            "grille %s remplie (%s, %s) : %d affectation(s), %d avertissement(s)",
            grille.id, strategie.value, politique.value, len(affectations), len(bilan.avertissements),
        )
        return ResultatRemplissage(
            enregistrement=enregistrement,
            avertissements=bilan.avertissements,
            non_places=bilan.non_places,
            sieges_libres=bilan.sieges_libres,
            est_valide=est_valide,
            violations=violations,
        )

    # --- historique ----------------------------------------------------------

    def historique(self, grille_id: str) -> List[EnregistrementPlacement]:
        """Enregistrements de la grille, du plus récent au plus ancien."""
        enregistrements = self.entrepot.enregistrements.filtrer(lambda e: e.grille_id == grille_id)
        # tri stable puis inversion : à date égale, le dernier inséré passe devant
        return list(reversed(sorted(enregistrements, key=lambda e: e.cree_le)))

    def courant(self, grille_id: str) -> Optional[EnregistrementPlacement]:
        historique: List[EnregistrementPlacement] = self.historique(grille_id)
        return historique[0] if historique else None

    def statistiques_strategies(self) -> Dict[str, int]:
        compte: Counter = Counter(e.strategie.value for e in self.entrepot.enregistrements.tous())
        return {s.value: compte.get(s.value, 0) for s in StrategieRemplissage}

    def supprimer_historique(self, grille_id: str) -> int:
        supprimes: int = 0
        for e in self.historique(grille_id):
            if self.entrepot.enregistrements.supprimer(e.id):
                supprimes += 1
        return supprimes
