from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from ..contraintes import voisins
from ..depot.base import Depot
from ..erreurs import ConflitUnicite, Introuvable
from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.groupe import GroupeVoisins
from ..modele.siege import Siege
from ..modele.validation import ResultatValidation

logger = logging.getLogger(__name__)


class GestionnaireGroupes:
    """Groupes de voisins persistés ; tient à jour `groupe_id` sur les élèves membres."""

    def __init__(self, depot: Depot[GroupeVoisins], depot_eleves: Depot[Eleve]) -> None:
        self.depot: Depot[GroupeVoisins] = depot
        self.depot_eleves: Depot[Eleve] = depot_eleves

    def creer(
            self,
            eleves_ids: Sequence[str],
            nom: Optional[str] = None,
            grille_id: Optional[str] = None,
    ) -> GroupeVoisins:
        """Lève `DonneesInvalides` (taille, doublon) ou `ConflitUnicite` (élève déjà groupé)."""
        groupe: GroupeVoisins = voisins.creer_groupe(eleves_ids, nom, grille_id)
        existants: List[GroupeVoisins] = self.tous()
        deja: List[str] = [i for i in groupe.eleves_ids if voisins.eleve_dans_groupe(i, existants)]
        if deja:
            raise ConflitUnicite([f"L'élève {i} appartient déjà à un groupe" for i in deja])
        for i in groupe.eleves_ids:
            if self.depot_eleves.par_id(i) is None:
                raise Introuvable("eleves", i)

        groupe = self.depot.inserer(groupe)
        for i in groupe.eleves_ids:
            self.depot_eleves.mettre_a_jour(i, groupe_id=groupe.id)
        logger.info("groupe %s créé (%d élèves)", groupe.id, groupe.taille())
        return groupe

    def supprimer(self, groupe_id: str) -> bool:
        groupe: Optional[GroupeVoisins] = self.depot.par_id(groupe_id)
        if groupe is None:
            return False
        for i in groupe.eleves_ids:
            eleve: Optional[Eleve] = self.depot_eleves.par_id(i)
            if eleve is not None and eleve.groupe_id == groupe_id:
                self.depot_eleves.mettre_a_jour(i, groupe_id=None)
        return self.depot.supprimer(groupe_id)

    def obtenir(self, groupe_id: str) -> GroupeVoisins:
        groupe: Optional[GroupeVoisins] = self.depot.par_id(groupe_id)
        if groupe is None:
            raise Introuvable("groupes", groupe_id)
        return groupe

    def tous(self) -> List[GroupeVoisins]:
        return self.depot.tous()

    def pour_grille(self, grille_id: str) -> List[GroupeVoisins]:
        """Groupes rattachés à `grille_id` ou à aucune grille."""
        return self.depot.filtrer(lambda g: g.grille_id in (None, grille_id))

    def groupe_de(self, eleve_id: str) -> Optional[GroupeVoisins]:
        return voisins.groupe_de(eleve_id, self.tous())

    def eleve_dans_groupe(self, eleve_id: str) -> bool:
        return voisins.eleve_dans_groupe(eleve_id, self.tous())

    @staticmethod
    def taille_valide(eleves_ids: Sequence[str]) -> bool:
        return voisins.taille_valide(eleves_ids)

    @staticmethod
    def valider(
            affectations: Iterable[Affectation],
            groupes: Sequence[GroupeVoisins],
            sieges: Iterable[Siege],
    ) -> ResultatValidation:
        return voisins.valider_groupes(affectations, groupes, sieges)
