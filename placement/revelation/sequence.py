"""
Séquençage de la révélation animée d'un placement.

On transforme un ensemble d'affectations en une liste ordonnée d'images
datées (délai cumulé en millisecondes depuis le début), sans aucun minuteur :
la lecture effective est l'affaire de `lecteur.LecteurRevelation` ou du
front-end.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..erreurs import DonneesInvalides
from ..melange import tirer_indice
from ..modele.affectation import Affectation
from ..modele.eleve import Eleve
from ..modele.grille import Grille
from ..modele.siege import position_depuis_identifiant
from ..reglages import reglage


class ModeRevelation(str, Enum):
    LOTERIE = "lottery"
    DIRECTE = "direct"


@dataclass(frozen=True)
class ConfigRevelation:
    """Paramètres d'une révélation en mode loterie.

    Attributs
    ---------
    vitesse_ms : float
        Durée d'affichage d'un siège (leurres compris), > 0.
    melanges : int
        Nombre d'images leurres par siège, >= 0.
    pause_ms : float
        Pause supplémentaire après l'image finale d'un siège, >= 0.
    """

    vitesse_ms: float = 1000
    melanges: int = 5
    pause_ms: float = 200

    def __post_init__(self) -> None:
        erreurs: List[str] = []
        if self.vitesse_ms <= 0:
            erreurs.append("La vitesse doit être strictement positive")
        if isinstance(self.melanges, bool) or not isinstance(self.melanges, int):
            erreurs.append("Le nombre de mélanges doit être un entier")
        elif self.melanges < 0:
            erreurs.append("Le nombre de mélanges ne peut pas être négatif")
        if self.pause_ms < 0:
            erreurs.append("La pause entre sièges ne peut pas être négative")
        if erreurs:
            raise DonneesInvalides(erreurs)

    @classmethod
    def depuis_reglages(cls, **surcharges: Any) -> "ConfigRevelation":
        valeurs: Dict[str, Any] = {
            "vitesse_ms": reglage("PLACEMENT_REVELATION_VITESSE_MS"),
            "melanges": reglage("PLACEMENT_REVELATION_MELANGES"),
            "pause_ms": reglage("PLACEMENT_REVELATION_PAUSE_MS"),
        }
        valeurs.update({k: v for k, v in surcharges.items() if v is not None})
        return cls(**valeurs)


@dataclass(frozen=True)
class Image:
    """Une image de la révélation : un nom affiché sur un siège à un instant donné."""

    siege_id: str
    eleve_nom: str
    delai_ms: float
    finale: bool

    def vers_dict(self) -> Dict[str, Any]:
        return {"seatId": self.siege_id, "studentName": self.eleve_nom, "delay": self.delai_ms, "isFinal": self.finale}


@dataclass
class SequenceRevelation:
    images: List[Image] = field(default_factory=list)
    duree_ms: float = 0

    def vers_dict(self) -> Dict[str, Any]:
        return {"frames": [i.vers_dict() for i in self.images], "duration_ms": self.duree_ms}


def _position(siege_id: str, grille: Optional[Grille]) -> Tuple[int, int]:
    if grille is not None:
        siege = grille.siege_par_id(siege_id)
        if siege is not None:
            return siege.position()
    return position_depuis_identifiant(siege_id) or (0, 0)


def ordre_de_visite(affectations: Iterable[Affectation], grille: Optional[Grille] = None) -> List[Affectation]:
    """Affectations triées par rangée croissante puis colonne croissante."""
    return sorted(affectations, key=lambda a: _position(a.siege_id, grille))


def sequence_loterie(
        affectations: Iterable[Affectation],
        eleves: Iterable[Eleve],
        config: Optional[ConfigRevelation] = None,
        grille: Optional[Grille] = None,
        rng: Optional[random.Random] = None,
) -> List[Image]:
    """
    Pour chaque siège : `melanges` leurres (autres élèves tirés avec remise),
    espacés de `vitesse_ms / melanges`, puis l'image finale de l'occupant ;
    le délai avance ensuite de `vitesse_ms + pause_ms`.

    Les affectations dont l'élève est absent de l'effectif sont ignorées.
    """
    config = config or ConfigRevelation.depuis_reglages()
    effectif: List[Eleve] = list(eleves)
    par_id: Mapping[str, Eleve] = {e.id: e for e in effectif if e.id is not None}

    images: List[Image] = []
    delai: float = 0
    for a in ordre_de_visite(affectations, grille):
        eleve: Optional[Eleve] = par_id.get(a.eleve_id)
        if eleve is None:
            continue
        autres: List[Eleve] = [e for e in effectif if e.id != eleve.id]
        if autres:
            for _ in range(config.melanges):
                leurre: Eleve = autres[tirer_indice(len(autres), rng)]
                images.append(Image(a.siege_id, leurre.nom, delai, False))
                delai += config.vitesse_ms / config.melanges
        images.append(Image(a.siege_id, eleve.nom, delai, True))
        delai += config.vitesse_ms + config.pause_ms
    return images


def sequence_directe(
        affectations: Iterable[Affectation],
        eleves: Iterable[Eleve],
        duree_base_ms: Optional[float] = None,
        multiplicateur: float = 1.0,
        grille: Optional[Grille] = None,
) -> List[Image]:
    """Une seule image finale par siège, espacées de `duree_base_ms / multiplicateur`."""
    if multiplicateur <= 0:
        raise DonneesInvalides("Le multiplicateur de vitesse doit être strictement positif")
    base: float = duree_base_ms if duree_base_ms is not None else reglage("PLACEMENT_REVELATION_VITESSE_MS")
    if base <= 0:
        raise DonneesInvalides("La vitesse doit être strictement positive")
    pas: float = base / multiplicateur

    par_id: Mapping[str, Eleve] = {e.id: e for e in eleves if e.id is not None}
    images: List[Image] = []
    for a in ordre_de_visite(affectations, grille):
        eleve: Optional[Eleve] = par_id.get(a.eleve_id)
        if eleve is None:
            continue
        images.append(Image(a.siege_id, eleve.nom, len(images) * pas, True))
    return images


def duree_totale(images: Sequence[Image], marge_ms: Optional[float] = None) -> float:
    """Délai de la dernière image plus une marge pour la laisser visible (0 si vide)."""
    if not images:
        return 0
    marge: float = marge_ms if marge_ms is not None else reglage("PLACEMENT_REVELATION_MARGE_MS")
    return images[-1].delai_ms + marge


def generer_sequence(
        affectations: Iterable[Affectation],
        eleves: Iterable[Eleve],
        mode: ModeRevelation = ModeRevelation.LOTERIE,
        config: Optional[ConfigRevelation] = None,
        multiplicateur: float = 1.0,
        grille: Optional[Grille] = None,
        rng: Optional[random.Random] = None,
) -> SequenceRevelation:
    mode = ModeRevelation(mode)
    if mode is ModeRevelation.DIRECTE:
        vitesse: Optional[float] = config.vitesse_ms if config is not None else None
        images: List[Image] = sequence_directe(affectations, eleves, vitesse, multiplicateur, grille)
    else:
        images = sequence_loterie(affectations, eleves, config, grille, rng)
    return SequenceRevelation(images=images, duree_ms=duree_totale(images))
