from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .siege import ModeNumerotation, Siege, TypeSiege, identifiant_siege
from .validation import ResultatValidation, date_vers_texte, texte_vers_date

RANGEES_MAX: int = 20
COLONNES_MAX: int = 20
CAPACITE_MAX: int = 400


def numero_sequentiel(rangee: int, colonne: int, nb_rangees: int) -> str:
    """
    Numéro affiché en mode séquentiel.

    On numérote colonne par colonne, du dernier rang vers le premier
    (convention « du fond vers le tableau »), sur deux chiffres minimum :
    numero = colonne * nb_rangees + (nb_rangees - 1 - rangee) + 1
    """
    numero: int = colonne * nb_rangees + (nb_rangees - 1 - rangee) + 1
    return str(numero).zfill(2)


def generer_sieges(rangees: int, colonnes: int, mode: ModeNumerotation = ModeNumerotation.SEQUENTIEL) -> List[Siege]:
    """
    Énumère les `rangees * colonnes` sièges, rangée par rangée puis colonne par colonne.

    Les identifiants ne dépendent que de (rangée, colonne) : deux générations
    aux mêmes dimensions produisent les mêmes identifiants.
    """
    mode = ModeNumerotation(mode)
    sieges: List[Siege] = []
    for r in range(rangees):
        for c in range(colonnes):
            numero: Optional[str] = numero_sequentiel(r, c, rangees) if mode is ModeNumerotation.SEQUENTIEL else None
            sieges.append(Siege(id=identifiant_siege(r, c), rangee=r, colonne=c, type=TypeSiege.NORMAL, numero=numero))
    return sieges


def valider_dimensions(rangees: Optional[int], colonnes: Optional[int]) -> ResultatValidation:
    """Contrôle des bornes : 1..20 par axe et 400 sièges au plus. Ne lève jamais."""
    erreurs: List[str] = []
    if rangees is not None and not (1 <= rangees <= RANGEES_MAX):
        erreurs.append(f"Le nombre de rangées doit être compris entre 1 et {RANGEES_MAX}")
    if colonnes is not None and not (1 <= colonnes <= COLONNES_MAX):
        erreurs.append(f"Le nombre de colonnes doit être compris entre 1 et {COLONNES_MAX}")
    if rangees and colonnes and rangees * colonnes > CAPACITE_MAX:
        erreurs.append(f"Le nombre total de sièges ne peut pas dépasser {CAPACITE_MAX}")
    return ResultatValidation.depuis(erreurs)


def sieges_par_rangee(sieges: Iterable[Siege]) -> Dict[int, List[Siege]]:
    """Regroupe les sièges par rangée (clés croissantes), triés par colonne croissante."""
    lignes: Dict[int, List[Siege]] = {}
    for s in sieges:
        lignes.setdefault(s.rangee, []).append(s)
    return {r: sorted(lignes[r], key=lambda s_2: s_2.colonne) for r in sorted(lignes)}


def sieges_par_colonne(sieges: Iterable[Siege]) -> Dict[int, List[Siege]]:
    """Analogue de `sieges_par_rangee` : clés = colonnes, sièges triés par rangée."""
    colonnes: Dict[int, List[Siege]] = {}
    for s in sieges:
        colonnes.setdefault(s.colonne, []).append(s)
    return {c: sorted(colonnes[c], key=lambda s_2: s_2.rangee) for c in sorted(colonnes)}


@dataclass(frozen=True)
class Grille:
    """
    Disposition complète d'une salle : rangées x colonnes de sièges.

    Les sièges sont générés une fois (création ou redimensionnement) puis ne
    changent plus, sauf bascule de leur type normal/spécial.

    Exemple :
        grille = Grille.generer("Salle 102", rangees=3, colonnes=2)
        grille.siege_a(0, 0).numero  # "03"
    """

    nom: str
    rangees: int
    colonnes: int
    mode: ModeNumerotation = ModeNumerotation.SEQUENTIEL
    sieges: Tuple[Siege, ...] = field(default_factory=tuple)
    par_defaut: bool = False
    id: Optional[str] = None
    cree_le: Optional[datetime] = None
    modifie_le: Optional[datetime] = None

    @classmethod
    def generer(
            cls,
            nom: str,
            rangees: int,
            colonnes: int,
            mode: ModeNumerotation = ModeNumerotation.SEQUENTIEL,
            par_defaut: bool = False,
    ) -> "Grille":
        """Construit une grille neuve et tous ses sièges (type normal)."""
        mode = ModeNumerotation(mode)
        return cls(
            nom=nom,
            rangees=rangees,
            colonnes=colonnes,
            mode=mode,
            sieges=tuple(generer_sieges(rangees, colonnes, mode)),
            par_defaut=par_defaut,
        )

    # --- Accès de base -----------------------------------------------------

    def sieges_normaux(self) -> List[Siege]:
        return [s for s in self.sieges if s.est_normal()]

    def capacite(self) -> int:
        """Nombre de sièges remplissables (type normal)."""
        return len(self.sieges_normaux())

    def siege_a(self, rangee: int, colonne: int) -> Optional[Siege]:
        for s in self.sieges:
            if s.rangee == rangee and s.colonne == colonne:
                return s
        return None

    def siege_par_id(self, siege_id: str) -> Optional[Siege]:
        for s in self.sieges:
            if s.id == siege_id:
                return s
        return None

    def index_sieges(self) -> Dict[str, Siege]:
        return {s.id: s for s in self.sieges}

    def par_rangee(self) -> Dict[int, List[Siege]]:
        return sieges_par_rangee(self.sieges)

    def par_colonne(self) -> Dict[int, List[Siege]]:
        return sieges_par_colonne(self.sieges)

    def avec_type_siege(self, siege_id: str, type_siege: TypeSiege) -> "Grille":
        """Retourne une copie où seul le type du siège `siege_id` a changé."""
        sieges = tuple(s.avec_type(type_siege) if s.id == siege_id else s for s in self.sieges)
        return replace(self, sieges=sieges)

    # --- Sérialisation -----------------------------------------------------

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.nom,
            "rows": self.rangees,
            "cols": self.colonnes,
            "seatNumberingMode": self.mode.value,
            "seats": [s.vers_dict() for s in self.sieges],
            "isDefault": self.par_defaut,
            "createdAt": date_vers_texte(self.cree_le),
            "updatedAt": date_vers_texte(self.modifie_le),
        }

    @classmethod
    def depuis_dict(cls, d: Dict[str, Any]) -> "Grille":
        return cls(
            nom=str(d.get("name", "")),
            rangees=int(d["rows"]),
            colonnes=int(d["cols"]),
            mode=ModeNumerotation(d.get("seatNumberingMode", ModeNumerotation.SEQUENTIEL.value)),
            sieges=tuple(Siege.depuis_dict(s) for s in d.get("seats", [])),
            par_defaut=bool(d.get("isDefault", False)),
            id=d.get("id"),
            cree_le=texte_vers_date(d.get("createdAt")),
            modifie_le=texte_vers_date(d.get("updatedAt")),
        )

    def __str__(self) -> str:
        """Représentation texte rangée par rangée (debug)."""
        parts: List[str] = []
        for ligne in self.par_rangee().values():
            parts.append(" | ".join(f"{s.numero or s.id}{'*' if not s.est_normal() else ''}" for s in ligne))
        return "\n".join(parts)
