from __future__ import annotations

import logging
import random
from typing import Dict, List

from .contraintes.genre import ResolveurGenre
from .contraintes.types import PolitiqueContrainte
from .depot.entrepot import Entrepot
from .modele.eleve import Eleve, Genre
from .modele.grille import Grille
from .modele.siege import TypeSiege
from .revelation.sequence import ConfigRevelation, ModeRevelation, generer_sequence
from .services.eleves import GestionnaireEleves
from .services.grilles import GestionnaireGrilles
from .services.groupes import GestionnaireGroupes
from .services.remplissage import OrchestrateurRemplissage, ResultatRemplissage


def construire_exemple(graine: int = 42) -> ResultatRemplissage:
    """
    construit une grille, un effectif et un groupe de voisins, puis lance un
    remplissage mixte garçons/filles et affiche le résultat rangée par rangée.
    """
    rng = random.Random(graine)
    entrepot: Entrepot = Entrepot.en_memoire()
    grilles = GestionnaireGrilles(entrepot.grilles)
    eleves = GestionnaireEleves(entrepot.eleves)
    groupes = GestionnaireGroupes(entrepot.groupes, entrepot.eleves)

    # salle : 4 rangées de 5 sièges, le siège près de la porte est condamné
    grille: Grille = grilles.creer("Salle 102", 4, 5, par_defaut=True)
    grille = grilles.changer_type_siege(grille.id, grille.siege_a(0, 4).id, TypeSiege.SPECIAL)

    # effectif : 18 élèves, genres alternés, un élève à besoins particuliers au premier rang
    effectif: List[Eleve] = [
        eleves.ajouter(f"DUPONT {chr(65 + i)}", Genre.FEMININ if i % 2 == 0 else Genre.MASCULIN)
        for i in range(18)
    ]
    effectif[0] = eleves.modifier(effectif[0].id, besoins_particuliers=True, siege_prefere_id=grille.siege_a(0, 0).id)
    binome = groupes.creer([effectif[2].id, effectif[3].id], "Binôme")

    politique: PolitiqueContrainte = ResolveurGenre.recommander(eleves.tous())
    resultat: ResultatRemplissage = OrchestrateurRemplissage(entrepot, rng).remplir_aleatoire(
        grille.id, politique, [binome]
    )

    noms: Dict[str, str] = {e.id: e.nom for e in eleves.tous()}
    occupants: Dict[str, str] = resultat.enregistrement.correspondance()
    print(f"=== {grille.nom} : politique {politique.value} ===")
    for r, ligne in grille.par_rangee().items():
        cases = []
        for s in ligne:
            if not s.est_normal():
                cases.append(f"{'xx':>10s}")
            else:
                cases.append(f"{noms.get(occupants.get(s.id, ''), '-'):>10s}")
        print(f"rangée {r} : " + " ".join(cases))

    for message in resultat.avertissements:
        print(" ! " + message)
    print(f"valide : {resultat.est_valide}, violations : {len(resultat.violations)}")

    sequence = generer_sequence(
        resultat.enregistrement.affectations,
        eleves.tous(),
        ModeRevelation.LOTERIE,
        ConfigRevelation(vitesse_ms=600, melanges=3, pause_ms=100),
        grille=grille,
        rng=rng,
    )
    print(f"révélation : {len(sequence.images)} images, {sequence.duree_ms / 1000:.1f} s")
    return resultat


def run_exemple(graine: int = 42) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    construire_exemple(graine)


if __name__ == "__main__":
    run_exemple()
