from __future__ import annotations

from typing import Callable, Dict, Optional, Type

from .base import RegleRangee
from .types import PolitiqueContrainte

_REGISTRE: Dict[PolitiqueContrainte, Type[RegleRangee]] = {}


def enregistrer(politique: PolitiqueContrainte) -> Callable[[Type[RegleRangee]], Type[RegleRangee]]:
    """Décorateur enregistrant la classe de règle d'une `PolitiqueContrainte`."""

    def deco(classe: Type[RegleRangee]) -> Type[RegleRangee]:
        _REGISTRE[politique] = classe
        return classe

    return deco


def regle_de(politique: PolitiqueContrainte) -> Optional[RegleRangee]:
    """Instancie la règle enregistrée pour `politique`, ou `None` (aucune règle)."""
    classe: Optional[Type[RegleRangee]] = _REGISTRE.get(PolitiqueContrainte(politique))
    return classe() if classe is not None else None


def politiques_enregistrees() -> list[PolitiqueContrainte]:
    return list(_REGISTRE)
