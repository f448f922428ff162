from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from ..depot.base import Depot
from ..erreurs import DonneesInvalides, Introuvable
from ..modele.grille import Grille, generer_sieges, valider_dimensions
from ..modele.siege import ModeNumerotation, Siege, TypeSiege
from ..modele.validation import ResultatValidation

logger = logging.getLogger(__name__)


class GestionnaireGrilles:
    """Création, redimensionnement et consultation des grilles de sièges."""

    def __init__(self, depot: Depot[Grille]) -> None:
        self.depot: Depot[Grille] = depot

    @staticmethod
    def valider(nom: Optional[str], rangees: Optional[int], colonnes: Optional[int]) -> ResultatValidation:
        erreurs: List[str] = []
        if nom is not None and not nom.strip():
            erreurs.append("Le nom de la grille est obligatoire")
        erreurs.extend(valider_dimensions(rangees, colonnes).erreurs)
        return ResultatValidation.depuis(erreurs)

    def creer(
            self,
            nom: str,
            rangees: int,
            colonnes: int,
            mode: ModeNumerotation = ModeNumerotation.SEQUENTIEL,
            par_defaut: bool = False,
    ) -> Grille:
        validation: ResultatValidation = self.valider(nom or "", rangees, colonnes)
        if not validation.est_valide:
            raise DonneesInvalides(validation.erreurs)
        if par_defaut:
            self._retirer_defaut()
        grille: Grille = self.depot.inserer(Grille.generer(nom.strip(), rangees, colonnes, mode, par_defaut))
        logger.info("grille %s créée (%dx%d)", grille.id, rangees, colonnes)
        return grille

    def modifier(
            self,
            grille_id: str,
            nom: Optional[str] = None,
            rangees: Optional[int] = None,
            colonnes: Optional[int] = None,
            mode: Optional[ModeNumerotation] = None,
    ) -> Grille:
        """Met à jour une grille ; les sièges sont régénérés si les dimensions ou la numérotation changent."""
        grille: Grille = self.obtenir(grille_id)
        validation: ResultatValidation = self.valider(nom, rangees, colonnes)
        if not validation.est_valide:
            raise DonneesInvalides(validation.erreurs)

        nouvelles_rangees: int = rangees if rangees is not None else grille.rangees
        nouvelles_colonnes: int = colonnes if colonnes is not None else grille.colonnes
        nouveau_mode: ModeNumerotation = ModeNumerotation(mode) if mode is not None else grille.mode
        changements: dict = {}
        if nom is not None:
            changements["nom"] = nom.strip()
        if (nouvelles_rangees, nouvelles_colonnes, nouveau_mode) != (grille.rangees, grille.colonnes, grille.mode):
            changements.update(
                rangees=nouvelles_rangees,
                colonnes=nouvelles_colonnes,
                mode=nouveau_mode,
                sieges=tuple(generer_sieges(nouvelles_rangees, nouvelles_colonnes, nouveau_mode)),
            )
            logger.info("grille %s régénérée (%dx%d)", grille_id, nouvelles_rangees, nouvelles_colonnes)
        if changements:
            self.depot.mettre_a_jour(grille_id, **changements)
        return self.obtenir(grille_id)

    def supprimer(self, grille_id: str) -> bool:
        grille: Grille = self.obtenir(grille_id)
        if grille.par_defaut:
            raise DonneesInvalides("Impossible de supprimer la grille par défaut")
        return self.depot.supprimer(grille_id)

    def obtenir(self, grille_id: str) -> Grille:
        grille: Optional[Grille] = self.depot.par_id(grille_id)
        if grille is None:
            raise Introuvable("grilles", grille_id)
        return grille

    def toutes(self) -> List[Grille]:
        return self.depot.tous()

    def par_defaut(self) -> Optional[Grille]:
        return next(iter(self.depot.filtrer(lambda g: g.par_defaut)), None)

    def _retirer_defaut(self) -> None:
        for g in self.depot.filtrer(lambda g_2: g_2.par_defaut):
            self.depot.mettre_a_jour(g.id, par_defaut=False)

    def definir_par_defaut(self, grille_id: str) -> Grille:
        self.obtenir(grille_id)
        self._retirer_defaut()
        self.depot.mettre_a_jour(grille_id, par_defaut=True)
        return self.obtenir(grille_id)

    def cloner(self, grille_id: str, nouveau_nom: str) -> Grille:
        """Copie une grille (types de sièges compris) sous un nouveau nom, jamais par défaut."""
        source: Grille = self.obtenir(grille_id)
        if not nouveau_nom or not nouveau_nom.strip():
            raise DonneesInvalides("Le nom de la grille est obligatoire")
        copie: Grille = replace(
            source, nom=nouveau_nom.strip(), par_defaut=False, id=None, cree_le=None, modifie_le=None
        )
        return self.depot.inserer(copie)

    def par_dimensions(self, rangees: int, colonnes: int) -> List[Grille]:
        return self.depot.filtrer(lambda g: g.rangees == rangees and g.colonnes == colonnes)

    # --- sièges --------------------------------------------------------------

    @staticmethod
    def capacite(grille: Grille) -> int:
        return grille.capacite()

    @staticmethod
    def siege_a(grille: Grille, rangee: int, colonne: int) -> Optional[Siege]:
        return grille.siege_a(rangee, colonne)

    @staticmethod
    def siege_par_id(grille: Grille, siege_id: str) -> Optional[Siege]:
        return grille.siege_par_id(siege_id)

    def changer_type_siege(self, grille_id: str, siege_id: str, type_siege: TypeSiege) -> Grille:
        """Seule mutation autorisée d'un siège après génération."""
        grille: Grille = self.obtenir(grille_id)
        if grille.siege_par_id(siege_id) is None:
            raise Introuvable("sieges", siege_id)
        modifiee: Grille = grille.avec_type_siege(siege_id, TypeSiege(type_siege))
        self.depot.mettre_a_jour(grille_id, sieges=modifiee.sieges)
        return self.obtenir(grille_id)
