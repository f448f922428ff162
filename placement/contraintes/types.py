from __future__ import annotations

from enum import Enum


class PolitiqueContrainte(str, Enum):
    """Règle de mixité appliquée lors d'un remplissage.

    Hérite de `str` pour une sérialisation JSON directe (valeur = nom stable).
    """

    AUCUNE = "none"
    MIXTE = "mixed_gender"
    MEME_GENRE = "same_gender"

    @classmethod
    def _missing_(cls, valeur: object):
        # les anciens enregistrements notent « random » pour l'absence de règle
        if valeur in ("random", "", None):
            return cls.AUCUNE
        return None


class TypeContrainteVoisins(str, Enum):
    """Saveur de la recommandation automatique de groupes de voisins."""

    AUCUNE = "none"
    MIXTE = "mixed_gender"
    MEME_GENRE = "same_gender"
    PERSONNALISEE = "custom"

    @classmethod
    def _missing_(cls, valeur: object):
        if valeur in ("random", "", None):
            return cls.AUCUNE
        return None
