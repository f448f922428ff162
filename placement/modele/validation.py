from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class ResultatValidation:
    """Résultat d'une validation « requête » : jamais levé, toujours renvoyé.

    Attributs
    ---------
    est_valide : bool
        `True` si aucune erreur n'a été relevée.
    erreurs : list[str]
        Messages bloquants, lisibles par un humain.
    avertissements : list[str]
        Messages informatifs, non bloquants.
    """

    est_valide: bool
    erreurs: List[str] = field(default_factory=list)
    avertissements: List[str] = field(default_factory=list)

    @classmethod
    def depuis(cls, erreurs: List[str], avertissements: Optional[List[str]] = None) -> "ResultatValidation":
        return cls(est_valide=not erreurs, erreurs=list(erreurs), avertissements=list(avertissements or []))

    def vers_dict(self) -> Dict[str, Any]:
        return {"isValid": self.est_valide, "errors": list(self.erreurs), "warnings": list(self.avertissements)}


def date_vers_texte(d: Optional[datetime]) -> Optional[str]:
    """Sérialise une date en ISO 8601 (ou `None`)."""
    return d.isoformat() if d is not None else None


def texte_vers_date(s: Optional[str]) -> Optional[datetime]:
    """Inverse de `date_vers_texte`."""
    return datetime.fromisoformat(s) if s else None


VRAIS = ("true", "1", "oui", "yes", "是")


def lire_booleen(valeur: Any) -> bool:
    """Drapeau lu depuis JSON, CSV ou formulaire : seules les valeurs de `VRAIS` valent vrai."""
    if isinstance(valeur, bool):
        return valeur
    return str(valeur or "").strip().lower() in VRAIS
