"""
Primitive de hasard unique du placement.

Tous les tirages (mélange des élèves, siège aléatoire d'un élève à besoins
particuliers, pile ou face d'une rangée, taille d'un groupe recommandé, leurres
de la révélation) passent par ce module. Les tests injectent un
`random.Random(graine)` pour rendre les tirages reproductibles.
"""
from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def _source(rng: Optional[random.Random]):
    return rng if rng is not None else random


def melanger(elements: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Retourne une copie mélangée de `elements` (Fisher-Yates).

    Pour i du dernier indice au premier, échange l'élément i avec un indice
    tiré uniformément dans [0, i]. La séquence d'entrée n'est pas modifiée.
    """
    resultat: List[T] = list(elements)
    source = _source(rng)
    i: int
    for i in range(len(resultat) - 1, 0, -1):
        j: int = source.randint(0, i)
        resultat[i], resultat[j] = resultat[j], resultat[i]
    return resultat


def tirer_indice(taille: int, rng: Optional[random.Random] = None) -> int:
    """Indice uniforme dans [0, taille)."""
    if taille <= 0:
        raise ValueError("impossible de tirer un indice dans une séquence vide")
    return _source(rng).randrange(taille)


def tirer_entier(bas: int, haut: int, rng: Optional[random.Random] = None) -> int:
    """Entier uniforme dans [bas, haut], bornes incluses."""
    return _source(rng).randint(bas, haut)


def pile_ou_face(rng: Optional[random.Random] = None) -> bool:
    """Tirage équiprobable."""
    return _source(rng).random() < 0.5
