"""
Lecture d'une séquence de révélation avec pause, reprise, arrêt et saut.

La boucle de lecture attend sur une `threading.Condition` : `pause`,
`reprendre`, `arreter` et `aller_a` la réveillent immédiatement, sans
scrutation. L'attente est découpée image par image (écart entre deux délais
cumulés) ; une pause conserve le temps déjà écoulé et la reprise n'attend que
le reliquat.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .sequence import Image

logger = logging.getLogger(__name__)


class Evenement(str, Enum):
    DEBUT = "start"
    PROGRESSION = "progress"
    PAUSE = "pause"
    REPRISE = "resume"
    ARRET = "stop"
    FIN = "complete"


Rappel = Callable[[Evenement, Optional[Image]], None]


@dataclass(frozen=True)
class EtatLecture:
    en_lecture: bool
    en_pause: bool
    index_courant: int
    total: int
    progression: float

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "isPlaying": self.en_lecture,
            "isPaused": self.en_pause,
            "currentIndex": self.index_courant,
            "totalFrames": self.total,
            "progress": self.progression,
        }


class LecteurRevelation:
    """Lecteur coopératif : une seule séquence en cours à la fois.

    `jouer` bloque jusqu'à la fin (True) ou l'arrêt (False) ; `lancer` fait la
    même chose dans un thread. Le rappel éventuel reçoit `(evenement, image)`,
    toujours appelé hors verrou.
    """

    def __init__(self, rappel: Optional[Rappel] = None, horloge: Callable[[], float] = time.monotonic) -> None:
        self._rappel: Optional[Rappel] = rappel
        self._horloge: Callable[[], float] = horloge
        self._cond = threading.Condition()
        self._images: List[Image] = []
        self._index: int = 0
        self._en_lecture: bool = False
        self._en_pause: bool = False
        self._restant: Optional[float] = None  # secondes restant à attendre avant l'image courante
        self._generation: int = 0
        self._thread: Optional[threading.Thread] = None

    # --- lecture -------------------------------------------------------------

    def jouer(self, images: Sequence[Image]) -> bool:
        return self._boucle(self._preparer(images))

    def lancer(self, images: Sequence[Image]) -> threading.Thread:
        generation: int = self._preparer(images)
        self._thread = threading.Thread(target=self._boucle, args=(generation,), daemon=True)
        self._thread.start()
        return self._thread

    def attendre(self, timeout: Optional[float] = None) -> bool:
        """Attend la fin du thread lancé par `lancer` ; `True` s'il est terminé."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _preparer(self, images: Sequence[Image]) -> int:
        if self._en_lecture:
            self.arreter()
        with self._cond:
            self._generation += 1
            self._images = list(images)
            self._index = 0
            self._restant = None
            self._en_pause = False
            self._en_lecture = True
            generation: int = self._generation
        self._emettre(Evenement.DEBUT)
        return generation

    def _ecart(self, index: int) -> float:
        precedent: float = self._images[index - 1].delai_ms if index > 0 else 0
        return max(0.0, (self._images[index].delai_ms - precedent) / 1000)

    def _suivante(self, generation: int) -> Tuple[str, Optional[Image]]:
        # verrou tenu par l'appelant
        while True:
            if generation != self._generation or not self._en_lecture:
                return "arret", None
            if self._en_pause:
                self._cond.wait()
                continue
            if self._index >= len(self._images):
                self._en_lecture = False
                return "fin", None
            if self._restant is None:
                self._restant = self._ecart(self._index)
            if self._restant > 0:
                attente: float = self._restant
                debut: float = self._horloge()
                self._cond.wait(attente)
                # aller_a ou arreter ont pu réinitialiser l'attente entre-temps
                if self._restant == attente:
                    self._restant = max(0.0, attente - (self._horloge() - debut))
                continue
            image: Image = self._images[self._index]
            self._index += 1
            self._restant = None
            return "image", image

    def _boucle(self, generation: int) -> bool:
        while True:
            with self._cond:
                issue, image = self._suivante(generation)
            if issue == "arret":
                return False
            if issue == "fin":
                self._emettre(Evenement.FIN)
                return True
            self._emettre(Evenement.PROGRESSION, image)

    # --- contrôle ------------------------------------------------------------

    def pause(self) -> None:
        with self._cond:
            if not self._en_lecture or self._en_pause:
                return
            self._en_pause = True
            self._cond.notify_all()
        self._emettre(Evenement.PAUSE)

    def reprendre(self) -> None:
        with self._cond:
            if not self._en_lecture or not self._en_pause:
                return
            self._en_pause = False
            self._cond.notify_all()
        self._emettre(Evenement.REPRISE)

    def arreter(self) -> None:
        """Abandonne la séquence ; la position revient à zéro et toute attente est libérée."""
        with self._cond:
            self._en_lecture = False
            self._en_pause = False
            self._index = 0
            self._restant = None
            self._generation += 1
            self._cond.notify_all()
        self._emettre(Evenement.ARRET)

    def aller_a(self, index: int) -> None:
        """Saute à l'image `index` (ignoré hors bornes) ; l'attente repart pour cette image."""
        with self._cond:
            if index < 0 or index >= len(self._images):
                return
            self._index = index
            self._restant = None
            self._cond.notify_all()

    # --- consultation --------------------------------------------------------

    def images_jouees(self) -> List[Image]:
        with self._cond:
            return self._images[:self._index]

    def etat(self) -> EtatLecture:
        with self._cond:
            total: int = len(self._images)
            return EtatLecture(
                en_lecture=self._en_lecture,
                en_pause=self._en_pause,
                index_courant=self._index,
                total=total,
                progression=(self._index / total) * 100 if total else 0.0,
            )

    def _emettre(self, evenement: Evenement, image: Optional[Image] = None) -> None:
        logger.debug("révélation : %s", evenement.value)
        if self._rappel is not None:
            self._rappel(evenement, image)
