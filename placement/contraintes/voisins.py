"""
Groupes de voisins : validité, contiguïté, recherche de blocs et recommandation.

Un groupe de 2 à 4 élèves doit occuper des sièges contigus, tous sur la même
rangée (colonnes consécutives) ou tous sur la même colonne (rangées consécutives).
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ..erreurs import DonneesInvalides
from ..melange import melanger, tirer_entier
from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.grille import sieges_par_colonne, sieges_par_rangee
from ..modele.groupe import TAILLE_MAX_GROUPE, TAILLE_MIN_GROUPE, GroupeVoisins
from ..modele.siege import Siege
from ..modele.validation import ResultatValidation
from .base import ResultatContrainte
from .types import TypeContrainteVoisins

logger = logging.getLogger(__name__)


# --- validité --------------------------------------------------------------

def taille_valide(eleves_ids: Sequence[str]) -> bool:
    return TAILLE_MIN_GROUPE <= len(eleves_ids) <= TAILLE_MAX_GROUPE


def creer_groupe(eleves_ids: Sequence[str], nom: Optional[str] = None, grille_id: Optional[str] = None) -> GroupeVoisins:
    """Construit un groupe après contrôle de la taille (2 à 4) et de l'unicité des ids.

    Lève `DonneesInvalides` sinon. L'appartenance à un autre groupe existant est
    contrôlée par le service qui connaît tous les groupes.
    """
    ids: List[str] = [str(i) for i in eleves_ids]
    if not taille_valide(ids):
        raise DonneesInvalides(f"Un groupe doit compter entre {TAILLE_MIN_GROUPE} et {TAILLE_MAX_GROUPE} élèves")
    if len(set(ids)) != len(ids):
        raise DonneesInvalides("Un même élève ne peut pas figurer deux fois dans un groupe")
    return GroupeVoisins(eleves_ids=tuple(ids), nom=nom or f"Groupe de {len(ids)}", grille_id=grille_id)


def eleve_dans_groupe(eleve_id: str, groupes: Iterable[GroupeVoisins]) -> bool:
    return any(g.contient(eleve_id) for g in groupes)


def groupe_de(eleve_id: str, groupes: Iterable[GroupeVoisins]) -> Optional[GroupeVoisins]:
    for g in groupes:
        if g.contient(eleve_id):
            return g
    return None


# --- contiguïté ------------------------------------------------------------

def _suite_continue(valeurs: Sequence[int]) -> bool:
    ordonnees: List[int] = sorted(valeurs)
    return all(b - a == 1 for a, b in zip(ordonnees, ordonnees[1:]))


def sieges_adjacents(positions: Sequence[Tuple[int, int]]) -> bool:
    """`True` si les positions (rangée, colonne) forment un bloc contigu en ligne ou en colonne."""
    if len(positions) < 2:
        return True
    rangees: List[int] = [p[0] for p in positions]
    colonnes: List[int] = [p[1] for p in positions]
    if len(set(rangees)) == 1:
        return _suite_continue(colonnes)
    if len(set(colonnes)) == 1:
        return _suite_continue(rangees)
    return False


def valider_groupes(
        affectations: Iterable[Affectation],
        groupes: Sequence[GroupeVoisins],
        sieges: Iterable[Siege],
) -> ResultatValidation:
    """Contrôle a posteriori : chaque groupe est entièrement placé sur un bloc contigu."""
    if not groupes:
        return ResultatValidation.depuis([], ["aucun groupe configuré"])

    position_par_siege: Dict[str, Tuple[int, int]] = {s.id: s.position() for s in sieges}
    siege_par_eleve: Dict[str, str] = {a.eleve_id: a.siege_id for a in affectations}

    erreurs: List[str] = []
    for g in groupes:
        non_places: List[str] = [i for i in g.eleves_ids if i not in siege_par_eleve]
        if non_places:
            erreurs.append(f"Groupe « {g.nom} » : {len(non_places)} élève(s) sans siège")
            continue
        positions: List[Tuple[int, int]] = [
            position_par_siege[siege_par_eleve[i]] for i in g.eleves_ids if siege_par_eleve[i] in position_par_siege
        ]
        if len(positions) != g.taille():
            erreurs.append(f"Groupe « {g.nom} » : sièges introuvables pour certains membres")
            continue
        if not sieges_adjacents(positions):
            erreurs.append(f"Groupe « {g.nom} » : les sièges des membres ne sont pas contigus")
    return ResultatValidation.depuis(erreurs)


# --- recherche de blocs ----------------------------------------------------

def _premiere_fenetre(lignes: Mapping[int, List[Siege]], taille: int, par_colonne: bool) -> Optional[List[Siege]]:
    for ligne in lignes.values():
        for i in range(len(ligne) - taille + 1):
            fenetre: List[Siege] = ligne[i:i + taille]
            cles: List[int] = [s.rangee if par_colonne else s.colonne for s in fenetre]
            if all(b == a + 1 for a, b in zip(cles, cles[1:])):
                return fenetre
    return None


def chercher_sieges_consecutifs(disponibles: Sequence[Siege], taille: int) -> List[Siege]:
    """
    Cherche `taille` sièges contigus parmi `disponibles`.

    1. par rangée, colonnes croissantes, première fenêtre sans trou ;
    2. sinon par colonne, rangées croissantes ;
    3. sinon, mode dégradé : les `taille` premiers sièges du réservoir, sans
       garantie de contiguïté (peut en renvoyer moins s'il n'y en a pas assez).
    """
    if taille <= 0:
        return []
    bloc: Optional[List[Siege]] = _premiere_fenetre(sieges_par_rangee(disponibles), taille, par_colonne=False)
    if bloc is None:
        bloc = _premiere_fenetre(sieges_par_colonne(disponibles), taille, par_colonne=True)
    if bloc is None:
        bloc = list(disponibles[:taille])
        if len(bloc) == taille:
            logger.warning("aucun bloc contigu de %d sièges : placement dégradé", taille)
    return bloc


def placer_groupes(
        disponibles: Sequence[Siege],
        groupes: Sequence[GroupeVoisins],
        eleves_connus: Optional[Set[str]] = None,
) -> Tuple[ResultatContrainte, List[Siege]]:
    """
    Place chaque groupe, dans l'ordre fourni, sur un bloc de sièges.

    Les premiers groupes se servent en premier. Un groupe sans bloc assez grand
    est ignoré (ses membres retombent dans le remplissage aléatoire).
    Retourne le résultat et les sièges restants.
    """
    resultat = ResultatContrainte()
    restants: List[Siege] = list(disponibles)
    deja_places: Set[str] = set()

    for g in groupes:
        membres: List[str] = [
            i for i in g.eleves_ids
            if (eleves_connus is None or i in eleves_connus) and i not in deja_places
        ]
        if not membres:
            continue
        bloc: List[Siege] = chercher_sieges_consecutifs(restants, len(membres))
        if len(bloc) < len(membres):
            message = f"Groupe « {g.nom} » : pas assez de sièges libres, groupe ignoré"
            logger.warning(message)
            resultat.avertissements.append(message)
            continue
        if not sieges_adjacents([s.position() for s in bloc]):
            resultat.avertissements.append(f"Groupe « {g.nom} » : placé sans sièges contigus")
        pris: Set[str] = set()
        for siege, eleve_id in zip(bloc, membres):
            resultat.affectations.append(Affectation(siege.id, eleve_id))
            pris.add(siege.id)
            deja_places.add(eleve_id)
        restants = [s for s in restants if s.id not in pris]

    return resultat, restants


# --- recommandation --------------------------------------------------------

@dataclass
class Recommandation:
    """Groupes proposés et indicateurs de qualité (indicatifs, non garantis)."""

    groupes: List[GroupeVoisins] = field(default_factory=list)
    score: int = 0
    couverture: float = 0.0
    type_contrainte: TypeContrainteVoisins = TypeContrainteVoisins.AUCUNE

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "groups": [g.vers_dict() for g in self.groupes],
            "score": self.score,
            "coverage": self.couverture,
            "constraintType": self.type_contrainte.value,
        }


def _decouper(
        eleves: Sequence[Eleve],
        nombre: int,
        rng: Optional[random.Random],
        libelle: str,
) -> List[GroupeVoisins]:
    groupes: List[GroupeVoisins] = []
    index: int = 0
    while len(groupes) < nombre and index + 1 < len(eleves):
        taille: int = tirer_entier(TAILLE_MIN_GROUPE, TAILLE_MAX_GROUPE, rng)
        tranche: Sequence[Eleve] = eleves[index:index + taille]
        if len(tranche) >= TAILLE_MIN_GROUPE:
            groupes.append(creer_groupe([e.id for e in tranche], f"{libelle} {len(groupes) + 1}"))
        index += taille
    return groupes


def recommander_groupes(
        eleves: Sequence[Eleve],
        nombre: int,
        type_contrainte: TypeContrainteVoisins = TypeContrainteVoisins.AUCUNE,
        rng: Optional[random.Random] = None,
) -> Recommandation:
    """
    Construit gloutonnement jusqu'à `nombre` groupes.

    - mixte : paires 1 garçon + 1 fille, puis paires de même genre sur le surplus ;
    - même genre : réservoirs mélangés mis bout à bout, tranches de 2 à 4 ;
    - personnalisé : aucun groupe (construction manuelle) ;
    - aucune : effectif entier mélangé, tranches de 2 à 4.
    """
    type_contrainte = TypeContrainteVoisins(type_contrainte)
    if len(eleves) < 2:
        return Recommandation(type_contrainte=type_contrainte)

    garcons: List[Eleve] = [e for e in eleves if e.est_garcon()]
    filles: List[Eleve] = [e for e in eleves if e.est_fille()]
    groupes: List[GroupeVoisins] = []

    if type_contrainte is TypeContrainteVoisins.PERSONNALISEE:
        return Recommandation(groupes=[], score=50, couverture=0.0, type_contrainte=type_contrainte)

    if type_contrainte is TypeContrainteVoisins.MIXTE:
        g_melanges: List[Eleve] = melanger(garcons, rng)
        f_melangees: List[Eleve] = melanger(filles, rng)
        nb_paires: int = min(nombre, len(g_melanges), len(f_melangees))
        for i in range(nb_paires):
            groupes.append(creer_groupe([g_melanges[i].id, f_melangees[i].id], f"Groupe mixte {i + 1}"))
        for reste, libelle in ((g_melanges[nb_paires:], "Groupe garçons"), (f_melangees[nb_paires:], "Groupe filles")):
            for i in range(min(nombre - len(groupes), len(reste) // 2)):
                groupes.append(creer_groupe([reste[2 * i].id, reste[2 * i + 1].id], f"{libelle} {i + 1}"))
        base, poids = 80, 20
    elif type_contrainte is TypeContrainteVoisins.MEME_GENRE:
        groupes = _decouper(melanger(garcons, rng) + melanger(filles, rng), nombre, rng, "Groupe même genre")
        base, poids = 75, 25
    else:
        groupes = _decouper(melanger(eleves, rng), nombre, rng, "Groupe aléatoire")
        base, poids = 60, 30

    couverture: float = sum(g.taille() for g in groupes) / len(eleves)
    return Recommandation(
        groupes=groupes,
        score=round(base + couverture * poids),
        couverture=round(couverture, 2),
        type_contrainte=type_contrainte,
    )
