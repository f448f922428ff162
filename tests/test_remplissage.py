from __future__ import annotations

import random

import pytest

from placement.contraintes.types import PolitiqueContrainte
from placement.erreurs import Introuvable
from placement.modele.affectation import StrategieRemplissage, doublons
from placement.modele.siege import TypeSiege
from placement.services.eleves import GestionnaireEleves
from placement.services.grilles import GestionnaireGrilles
from placement.services.groupes import GestionnaireGroupes
from placement.services.remplissage import OrchestrateurRemplissage


@pytest.fixture
def classe(entrepot):
    """Grille 2x2 et effectif A(g), B(f), C(g), D(f)."""
    grille = GestionnaireGrilles(entrepot.grilles).creer("Salle", 2, 2, par_defaut=True)
    eleves = GestionnaireEleves(entrepot.eleves)
    for nom, genre in (("A", "male"), ("B", "female"), ("C", "male"), ("D", "female")):
        eleves.ajouter(nom, genre, id=nom)
    return grille


def test_remplissage_mixte_deux_par_deux(entrepot, classe):
    orchestrateur = OrchestrateurRemplissage(entrepot, random.Random(3))
    res = orchestrateur.remplir(classe.id, StrategieRemplissage.ALEATOIRE, PolitiqueContrainte.MIXTE)
    assert res.est_valide
    assert res.violations == []
    assert len(res.enregistrement.affectations) == 4
    assert res.enregistrement.politique is PolitiqueContrainte.MIXTE
    assert res.non_places == [] and res.sieges_libres == []


def test_remplissage_aleatoire_avec_surplus(entrepot, classe):
    GestionnaireEleves(entrepot.eleves).ajouter("E", "female")
    res = OrchestrateurRemplissage(entrepot, random.Random(1)).remplir_aleatoire(classe.id)
    assert len(res.non_places) == 1
    assert res.avertissements
    assert doublons(list(res.enregistrement.affectations)) == ([], [])


def test_remplissage_manuel_tel_quel(entrepot, classe):
    orchestrateur = OrchestrateurRemplissage(entrepot)
    res = orchestrateur.remplir_manuel(classe.id, {"siege_0_0": "A", "siege_0_1": "A", "siege_9_9": "B", "siege_1_0": "Z"})
    # sièges/élèves inconnus ignorés avec avertissement ; le doublon est conservé et invalide le résultat
    assert res.enregistrement.correspondance() == {"siege_0_0": "A", "siege_0_1": "A"}
    assert len(res.avertissements) == 2
    assert res.est_valide is False


def test_remplissage_mixte_respecte_le_fixe(entrepot, classe):
    GestionnaireGrilles(entrepot.grilles).changer_type_siege(classe.id, "siege_1_1", TypeSiege.SPECIAL)
    orchestrateur = OrchestrateurRemplissage(entrepot, random.Random(7))
    res = orchestrateur.remplir(
        classe.id, StrategieRemplissage.MIXTE, correspondance={"siege_1_1": "D"},
    )
    correspondance = res.enregistrement.correspondance()
    # le fixe peut viser un siège spécial ; le reste est complété au hasard
    assert correspondance["siege_1_1"] == "D"
    assert len(correspondance) == 4
    assert res.est_valide
    assert res.enregistrement.strategie is StrategieRemplissage.MIXTE


def test_remplissage_avec_groupe(entrepot):
    grille = GestionnaireGrilles(entrepot.grilles).creer("Salle", 2, 3)
    eleves = GestionnaireEleves(entrepot.eleves)
    ids = [eleves.ajouter(f"E{i}", "male" if i % 2 else "female").id for i in range(6)]
    groupe = GestionnaireGroupes(entrepot.groupes, entrepot.eleves).creer(ids[:3], "trio")
    res = OrchestrateurRemplissage(entrepot, random.Random(2)).remplir_aleatoire(grille.id, groupes=[groupe])
    positions = {a.eleve_id: a.siege_id for a in res.enregistrement.affectations}
    rangees = {positions[i].split("_")[1] for i in ids[:3]}
    assert len(rangees) == 1
    assert res.avertissements == []


def test_grille_inconnue(entrepot):
    with pytest.raises(Introuvable):
        OrchestrateurRemplissage(entrepot).remplir_aleatoire("absente")


def test_historique_du_plus_recent_au_plus_ancien(entrepot, classe):
    orchestrateur = OrchestrateurRemplissage(entrepot, random.Random(0))
    premier = orchestrateur.remplir_aleatoire(classe.id).enregistrement
    second = orchestrateur.remplir_manuel(classe.id, {"siege_0_0": "A"}).enregistrement
    troisieme = orchestrateur.remplir_aleatoire(classe.id).enregistrement

    assert [e.id for e in orchestrateur.historique(classe.id)] == [troisieme.id, second.id, premier.id]
    assert orchestrateur.courant(classe.id).id == troisieme.id
    assert orchestrateur.statistiques_strategies() == {"random": 2, "manual": 1, "mixed": 0}
    # un enregistrement n'est jamais modifié par un remplissage ultérieur
    assert entrepot.enregistrements.par_id(premier.id) == premier

    assert orchestrateur.supprimer_historique(classe.id) == 3
    assert orchestrateur.courant(classe.id) is None


def test_vers_dict(entrepot, classe):
    res = OrchestrateurRemplissage(entrepot, random.Random(0)).remplir_aleatoire(classe.id, PolitiqueContrainte.MIXTE)
    d = res.vers_dict()
    assert d["valid"] is True
    assert d["record"]["constraintPolicy"] == "mixed_gender"
    assert len(d["record"]["assignments"]) == 4
