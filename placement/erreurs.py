from __future__ import annotations

from typing import Iterable


class ErreurPlacement(Exception):
    """Classe de base des erreurs levées par le cœur de placement."""


class DonneesInvalides(ErreurPlacement, ValueError):
    """Entrée mal formée refusée par une opération de construction.

    Les messages de validation individuels restent accessibles via `erreurs`.
    """

    def __init__(self, erreurs: Iterable[str] | str) -> None:
        if isinstance(erreurs, str):
            erreurs = [erreurs]
        self.erreurs: list[str] = list(erreurs)
        super().__init__(", ".join(self.erreurs))


class ConflitUnicite(DonneesInvalides):
    """Nom d'élève déjà pris, élève déjà membre d'un autre groupe, ou identifiant déjà stocké."""


class Introuvable(ErreurPlacement, LookupError):
    """Référence (grille, élève, groupe, enregistrement) absente du dépôt."""

    def __init__(self, collection: str, identifiant: str) -> None:
        self.collection: str = collection
        self.identifiant: str = identifiant
        super().__init__(f"{collection}: identifiant {identifiant!r} introuvable")
