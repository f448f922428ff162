from __future__ import annotations

import random

import pytest

from placement.contraintes.types import TypeContrainteVoisins
from placement.contraintes.voisins import (
    chercher_sieges_consecutifs,
    creer_groupe,
    placer_groupes,
    recommander_groupes,
    sieges_adjacents,
    valider_groupes,
)
from placement.erreurs import DonneesInvalides
from placement.modele.affectation import Affectation
from placement.modele.grille import Grille
from placement.modele.siege import Siege

from conftest import fabriquer_eleve


def test_bloc_de_trois_dans_une_rangee_de_cinq():
    grille = Grille.generer("Salle", 1, 5)
    bloc = chercher_sieges_consecutifs(grille.sieges, 3)
    colonnes = [s.colonne for s in bloc]
    assert len(bloc) == 3
    assert all(b == a + 1 for a, b in zip(colonnes, colonnes[1:]))
    positions = [s.position() for s in bloc]
    assert sieges_adjacents(positions)
    # un membre déplacé sur une colonne non contiguë
    deplace = positions[:-1] + [(0, positions[-1][1] + 1)]
    assert not sieges_adjacents(deplace)


def test_adjacence_en_colonne_et_cas_mixtes():
    assert sieges_adjacents([(2, 1), (0, 1), (1, 1)])
    assert not sieges_adjacents([(0, 0), (1, 1)])
    assert not sieges_adjacents([(0, 0), (0, 2)])
    assert sieges_adjacents([(4, 4)])


def test_recherche_par_colonne_quand_aucune_rangee_ne_suffit():
    grille = Grille.generer("Salle", 3, 3)
    # on ne garde que la colonne 1 et des sièges isolés
    disponibles = [s for s in grille.sieges if s.colonne == 1 or s.id == "siege_0_0"]
    bloc = chercher_sieges_consecutifs(disponibles, 3)
    assert [s.id for s in bloc] == ["siege_0_1", "siege_1_1", "siege_2_1"]


def test_repli_degrade_sur_les_premiers_sieges():
    disponibles = [Siege("siege_0_0", 0, 0), Siege("siege_2_2", 2, 2), Siege("siege_4_4", 4, 4)]
    bloc = chercher_sieges_consecutifs(disponibles, 2)
    assert [s.id for s in bloc] == ["siege_0_0", "siege_2_2"]
    assert not sieges_adjacents([s.position() for s in bloc])


def test_creation_de_groupe():
    g = creer_groupe(["a", "b", "c"])
    assert g.nom == "Groupe de 3"
    with pytest.raises(DonneesInvalides):
        creer_groupe(["a"])
    with pytest.raises(DonneesInvalides):
        creer_groupe(["a", "b", "c", "d", "e"])
    with pytest.raises(DonneesInvalides):
        creer_groupe(["a", "a"])


def test_placement_dans_l_ordre_fourni():
    grille = Grille.generer("Salle", 1, 5)
    g1 = creer_groupe(["a", "b", "c"], "premier")
    g2 = creer_groupe(["d", "e", "f"], "second")
    res, restants = placer_groupes(grille.sieges, [g1, g2])
    # le premier groupe se sert d'abord ; il ne reste que 2 sièges pour le second
    assert [a.eleve_id for a in res.affectations] == ["a", "b", "c"]
    assert len(restants) == 2
    assert any("second" in m for m in res.avertissements)


def test_validation_des_groupes():
    grille = Grille.generer("Salle", 2, 3)
    g1 = creer_groupe(["a", "b"], "voisins")
    g2 = creer_groupe(["c", "d"], "éloignés")
    g3 = creer_groupe(["e", "f"], "absents")
    affectations = [
        Affectation("siege_0_0", "a"),
        Affectation("siege_0_1", "b"),
        Affectation("siege_0_2", "c"),
        Affectation("siege_1_0", "d"),
        Affectation("siege_1_1", "e"),
    ]
    res = valider_groupes(affectations, [g1, g2, g3], grille.sieges)
    assert not res.est_valide
    assert len(res.erreurs) == 2
    assert any("éloignés" in e for e in res.erreurs)
    assert any("absents" in e for e in res.erreurs)

    vide = valider_groupes(affectations, [], grille.sieges)
    assert vide.est_valide
    assert vide.avertissements == ["aucun groupe configuré"]


def test_recommandation_mixte():
    eleves = [fabriquer_eleve(f"g{i}", "male") for i in range(4)] + [fabriquer_eleve(f"f{i}", "female") for i in range(2)]
    reco = recommander_groupes(eleves, 3, TypeContrainteVoisins.MIXTE, random.Random(4))
    # 2 paires mixtes puis une paire de garçons
    assert len(reco.groupes) == 3
    assert reco.couverture == 1.0
    assert reco.score == 100
    par_id = {e.id: e for e in eleves}
    for g in reco.groupes[:2]:
        assert {par_id[i].genre.value for i in g.eleves_ids} == {"male", "female"}


def test_recommandation_autres_types():
    eleves = [fabriquer_eleve(f"e{i}", "male" if i % 2 else "female") for i in range(10)]
    rng = random.Random(8)
    assert recommander_groupes(eleves, 3, TypeContrainteVoisins.PERSONNALISEE, rng).groupes == []
    assert recommander_groupes(eleves[:1], 3).groupes == []

    for type_contrainte in (TypeContrainteVoisins.AUCUNE, TypeContrainteVoisins.MEME_GENRE):
        reco = recommander_groupes(eleves, 2, type_contrainte, rng)
        assert 1 <= len(reco.groupes) <= 2
        assert all(2 <= g.taille() <= 4 for g in reco.groupes)
        ids = [i for g in reco.groupes for i in g.eleves_ids]
        assert len(ids) == len(set(ids))
        assert 0 < reco.couverture <= 1
