from __future__ import annotations

import random
from typing import List

import pytest

from placement.depot.entrepot import Entrepot
from placement.modele.eleve import Eleve, Genre


def fabriquer_eleve(ident: str, genre: str, **options) -> Eleve:
    """Élève déjà identifié, nommé d'après son identifiant."""
    return Eleve(nom=f"Élève {ident}", genre=Genre(genre), id=ident, **options)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def entrepot() -> Entrepot:
    return Entrepot.en_memoire()


@pytest.fixture
def quatre_eleves() -> List[Eleve]:
    # A et C garçons, B et D filles
    return [
        fabriquer_eleve("A", "male"),
        fabriquer_eleve("B", "female"),
        fabriquer_eleve("C", "male"),
        fabriquer_eleve("D", "female"),
    ]
