from __future__ import annotations

import random
import threading
import time

import pytest

from placement.erreurs import DonneesInvalides
from placement.modele.affectation import Affectation
from placement.revelation.lecteur import Evenement, LecteurRevelation
from placement.revelation.sequence import (
    ConfigRevelation,
    Image,
    ModeRevelation,
    duree_totale,
    generer_sequence,
    sequence_directe,
    sequence_loterie,
)

from conftest import fabriquer_eleve

# affectations volontairement dans le désordre
AFFECTATIONS = [
    Affectation("siege_1_0", "C"),
    Affectation("siege_0_1", "B"),
    Affectation("siege_1_1", "D"),
    Affectation("siege_0_0", "A"),
]


# --- séquence --------------------------------------------------------------

def test_loterie_ordre_et_delais(quatre_eleves):
    config = ConfigRevelation(vitesse_ms=1000, melanges=5, pause_ms=200)
    images = sequence_loterie(AFFECTATIONS, quatre_eleves, config, rng=random.Random(3))
    assert len(images) == 4 * 6
    finales = [i for i in images if i.finale]
    assert [i.siege_id for i in finales] == ["siege_0_0", "siege_0_1", "siege_1_0", "siege_1_1"]
    assert [i.delai_ms for i in finales] == [1000, 3200, 5400, 7600]
    assert all(a.delai_ms < b.delai_ms for a, b in zip(images, images[1:]))
    assert duree_totale(images) == 8600


def test_leurres_jamais_l_occupant(quatre_eleves):
    images = sequence_loterie(AFFECTATIONS, quatre_eleves, ConfigRevelation(melanges=8), rng=random.Random(1))
    occupant = {i.siege_id: i.eleve_nom for i in images if i.finale}
    assert all(i.eleve_nom != occupant[i.siege_id] for i in images if not i.finale)


def test_loterie_cas_limites():
    seul = [fabriquer_eleve("A", "male")]
    images = sequence_loterie([Affectation("siege_0_0", "A"), Affectation("siege_0_1", "inconnu")], seul,
                              ConfigRevelation(melanges=3))
    # pas d'autre élève pour les leurres ; l'affectation inconnue est ignorée
    assert images == [Image("siege_0_0", "Élève A", 0, True)]
    assert duree_totale([]) == 0


def test_mode_direct(quatre_eleves):
    images = sequence_directe(AFFECTATIONS[:3], quatre_eleves, duree_base_ms=1000, multiplicateur=2)
    assert [i.delai_ms for i in images] == [0, 500, 1000]
    assert all(i.finale for i in images)
    with pytest.raises(DonneesInvalides):
        sequence_directe(AFFECTATIONS, quatre_eleves, multiplicateur=0)


def test_generer_sequence_et_serialisation(quatre_eleves):
    seq = generer_sequence(AFFECTATIONS, quatre_eleves, ModeRevelation.DIRECTE, ConfigRevelation(vitesse_ms=300))
    d = seq.vers_dict()
    assert d["duration_ms"] == 900 + 1000
    assert d["frames"][0] == {"seatId": "siege_0_0", "studentName": "Élève A", "delay": 0, "isFinal": True}


def test_configuration_validee():
    with pytest.raises(DonneesInvalides):
        ConfigRevelation(vitesse_ms=0)
    with pytest.raises(DonneesInvalides) as exc:
        ConfigRevelation(melanges=-1, pause_ms=-5)
    assert len(exc.value.erreurs) == 2
    with pytest.raises(DonneesInvalides):
        ConfigRevelation(melanges=2.5)
    assert ConfigRevelation.depuis_reglages(melanges=2) == ConfigRevelation(1000, 2, 200)


# --- lecteur ---------------------------------------------------------------

def _images(*delais):
    return [Image(f"siege_0_{i}", f"E{i}", d, True) for i, d in enumerate(delais)]


class Journal:
    """Rappel de test : mémorise les événements et signale la première image."""

    def __init__(self):
        self.evenements = []
        self.images = []
        self.premiere = threading.Event()

    def __call__(self, evenement, image):
        self.evenements.append(evenement)
        if evenement is Evenement.PROGRESSION:
            self.images.append(image)
            self.premiere.set()


def test_lecture_complete():
    journal = Journal()
    lecteur = LecteurRevelation(journal)
    images = _images(0, 10, 20, 30)
    assert lecteur.jouer(images) is True
    assert journal.evenements == [Evenement.DEBUT] + [Evenement.PROGRESSION] * 4 + [Evenement.FIN]
    assert journal.images == images
    etat = lecteur.etat()
    assert (etat.en_lecture, etat.index_courant, etat.total, etat.progression) == (False, 4, 4, 100)


def test_pause_puis_reprise_sans_perte_d_image():
    journal = Journal()
    lecteur = LecteurRevelation(journal)
    images = _images(0, 100, 200)
    lecteur.lancer(images)
    assert journal.premiere.wait(1)
    lecteur.pause()
    time.sleep(0.3)
    etat = lecteur.etat()
    assert etat.en_pause and etat.index_courant == 1
    assert lecteur.images_jouees() == images[:1]

    lecteur.reprendre()
    assert lecteur.attendre(2)
    assert journal.images == images
    assert Evenement.PAUSE in journal.evenements and Evenement.REPRISE in journal.evenements
    assert journal.evenements[-1] is Evenement.FIN


def test_reprise_conserve_le_temps_deja_ecoule():
    lecteur = LecteurRevelation()
    images = _images(0, 600)
    lecteur.lancer(images)
    time.sleep(0.4)
    lecteur.pause()
    lecteur.reprendre()
    debut = time.monotonic()
    assert lecteur.attendre(2)
    # ~200 ms restants, et non 600 ms
    assert time.monotonic() - debut < 0.45


def test_arret_libere_l_attente_et_remet_a_zero():
    journal = Journal()
    lecteur = LecteurRevelation(journal)
    lecteur.lancer(_images(0, 10_000))
    assert journal.premiere.wait(1)
    lecteur.arreter()
    assert lecteur.attendre(1)
    etat = lecteur.etat()
    assert (etat.en_lecture, etat.en_pause, etat.index_courant) == (False, False, 0)
    assert Evenement.ARRET in journal.evenements
    assert Evenement.FIN not in journal.evenements


def test_saut_vers_une_image():
    journal = Journal()
    lecteur = LecteurRevelation(journal)
    images = _images(0, 10_000, 10_001, 10_002)
    lecteur.lancer(images)
    assert journal.premiere.wait(1)
    lecteur.aller_a(99)  # hors bornes : ignoré
    lecteur.aller_a(3)
    assert lecteur.attendre(1)
    assert journal.images == [images[0], images[3]]


def test_etat_vide():
    etat = LecteurRevelation().etat()
    assert etat.vers_dict() == {
        "isPlaying": False, "isPaused": False, "currentIndex": 0, "totalFrames": 0, "progress": 0.0,
    }
