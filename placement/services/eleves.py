"""
Gestion de l'effectif : validation, CRUD, import de lignes brutes, statistiques.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..depot.base import Depot
from ..erreurs import ConflitUnicite, DonneesInvalides, Introuvable
from ..modele.eleve import Eleve, Genre
from ..modele.validation import ResultatValidation, lire_booleen

logger = logging.getLogger(__name__)

NOM_MAX: int = 50
# longueurs au-delà desquelles on avertit sans refuser
LONGUEURS_CONSEILLEES: Dict[str, Tuple[str, int]] = {
    "contact": ("contact", 100),
    "niveau": ("niveau", 20),
    "classe": ("classe", 50),
    "notes": ("notes", 500),
}

GENRES_ACCEPTES: Dict[str, Genre] = {
    "male": Genre.MASCULIN,
    "m": Genre.MASCULIN,
    "1": Genre.MASCULIN,
    "homme": Genre.MASCULIN,
    "h": Genre.MASCULIN,
    "garçon": Genre.MASCULIN,
    "男": Genre.MASCULIN,
    "female": Genre.FEMININ,
    "f": Genre.FEMININ,
    "0": Genre.FEMININ,
    "femme": Genre.FEMININ,
    "fille": Genre.FEMININ,
    "女": Genre.FEMININ,
}


# id et horodatages restent gérés par le dépôt
CHAMPS_MODIFIABLES = frozenset(f.name for f in fields(Eleve)) - {"id", "cree_le", "modifie_le"}


def normaliser_genre(valeur: Any) -> Optional[Genre]:
    """Retourne le genre reconnu, ou `None` si la valeur n'est pas interprétable."""
    if valeur is None:
        return None
    return GENRES_ACCEPTES.get(str(valeur).strip().lower())


@dataclass
class ResultatImport:
    """Bilan d'un import ligne à ligne.

    `erreurs` contient des triplets (numéro de ligne à partir de 1, nom lu, message).
    """

    succes: int = 0
    echecs: int = 0
    erreurs: List[Tuple[int, str, str]] = field(default_factory=list)
    eleves: List[Eleve] = field(default_factory=list)


class GestionnaireEleves:
    def __init__(self, depot: Depot[Eleve]) -> None:
        self.depot: Depot[Eleve] = depot

    # --- validation ----------------------------------------------------------

    @staticmethod
    def valider(donnees: Mapping[str, Any]) -> ResultatValidation:
        """Contrôle les champs d'un élève (clés : nom, genre, contact, niveau, classe, notes)."""
        erreurs: List[str] = []
        avertissements: List[str] = []

        nom: str = str(donnees.get("nom") or "").strip()
        if not nom:
            erreurs.append("Le nom de l'élève est obligatoire")
        elif len(nom) > NOM_MAX:
            erreurs.append(f"Le nom ne peut pas dépasser {NOM_MAX} caractères")

        if donnees.get("genre") not in (Genre.MASCULIN.value, Genre.FEMININ.value):
            erreurs.append("Le genre doit être « male » ou « female »")

        for cle, (libelle, maximum) in LONGUEURS_CONSEILLEES.items():
            valeur = donnees.get(cle)
            if valeur and len(str(valeur)) > maximum:
                avertissements.append(f"Le champ {libelle} dépasse {maximum} caractères")

        return ResultatValidation.depuis(erreurs, avertissements)

    def _nom_pris(self, nom: str, sauf: Optional[str] = None) -> bool:
        return any(e.nom == nom and e.id != sauf for e in self.depot.tous())

    # --- CRUD ----------------------------------------------------------------

    def ajouter(self, nom: str, genre: Genre | str, **options: Any) -> Eleve:
        """Crée un élève ; lève `DonneesInvalides` ou `ConflitUnicite` (nom déjà pris)."""
        validation: ResultatValidation = self.valider({"nom": nom, "genre": genre, **options})
        if not validation.est_valide:
            raise DonneesInvalides(validation.erreurs)
        for message in validation.avertissements:
            logger.warning("élève %r : %s", nom, message)
        if self._nom_pris(nom.strip()):
            raise ConflitUnicite(f"Un élève nommé « {nom.strip()} » existe déjà")
        eleve: Eleve = self.depot.inserer(Eleve(nom=nom, genre=Genre(genre), **options))
        logger.debug("élève %s ajouté", eleve.id)
        return eleve

    def modifier(self, eleve_id: str, **changements: Any) -> Eleve:
        inconnus: List[str] = sorted(set(changements) - CHAMPS_MODIFIABLES)
        if inconnus:
            raise DonneesInvalides(f"Champ(s) inconnu(s) : {', '.join(inconnus)}")
        actuel: Eleve = self.obtenir(eleve_id)
        fusion: Dict[str, Any] = {
            "nom": changements.get("nom", actuel.nom),
            "genre": changements.get("genre", actuel.genre),
            **{k: changements.get(k, getattr(actuel, k)) for k in LONGUEURS_CONSEILLEES},
        }
        validation: ResultatValidation = self.valider(fusion)
        if not validation.est_valide:
            raise DonneesInvalides(validation.erreurs)
        if "nom" in changements:
            changements["nom"] = str(changements["nom"]).strip()
            if changements["nom"] != actuel.nom and self._nom_pris(changements["nom"], sauf=eleve_id):
                raise ConflitUnicite(f"Un élève nommé « {changements['nom']} » existe déjà")
        if "genre" in changements:
            changements["genre"] = Genre(changements["genre"])
        self.depot.mettre_a_jour(eleve_id, **changements)
        return self.obtenir(eleve_id)

    def supprimer(self, eleve_id: str) -> bool:
        return self.depot.supprimer(eleve_id)

    def obtenir(self, eleve_id: str) -> Eleve:
        eleve: Optional[Eleve] = self.depot.par_id(eleve_id)
        if eleve is None:
            raise Introuvable("eleves", eleve_id)
        return eleve

    def tous(self) -> List[Eleve]:
        return self.depot.tous()

    # --- import --------------------------------------------------------------

    def importer(self, lignes: Iterable[Mapping[str, Any]]) -> ResultatImport:
        """
        Importe des lignes brutes (clés `name`, `gender`, `specialNeeds`, `contact`,
        `grade`, `className`, `notes`). Chaque ligne fautive est comptée et décrite,
        l'import continue ; cette méthode ne lève pas.
        """
        resultat = ResultatImport()
        numero: int
        for numero, ligne in enumerate(lignes, start=1):
            nom: str = str(ligne.get("name") or "").strip()
            genre: Optional[Genre] = normaliser_genre(ligne.get("gender"))
            if genre is None:
                resultat.echecs += 1
                resultat.erreurs.append((numero, nom, f"Genre non reconnu : {ligne.get('gender')!r}"))
                continue
            options: Dict[str, Any] = {
                "besoins_particuliers": lire_booleen(ligne.get("specialNeeds")),
                "contact": ligne.get("contact") or None,
                "niveau": ligne.get("grade") or None,
                "classe": ligne.get("className") or None,
                "notes": ligne.get("notes") or None,
            }
            try:
                resultat.eleves.append(self.ajouter(nom, genre, **options))
            except DonneesInvalides as exc:
                resultat.echecs += 1
                resultat.erreurs.append((numero, nom, str(exc)))
                continue
            resultat.succes += 1
        logger.info("import élèves : %d réussi(s), %d échec(s)", resultat.succes, resultat.echecs)
        return resultat

    # --- requêtes ------------------------------------------------------------

    def statistiques_genre(self) -> Dict[str, int]:
        eleves: List[Eleve] = self.tous()
        garcons: int = sum(1 for e in eleves if e.est_garcon())
        filles: int = sum(1 for e in eleves if e.est_fille())
        return {"male": garcons, "female": filles, "total": len(eleves)}

    def par_classe(self, classe: str) -> List[Eleve]:
        return self.depot.filtrer(lambda e: e.classe == classe)

    def besoins_particuliers(self) -> List[Eleve]:
        return self.depot.filtrer(lambda e: e.besoins_particuliers)

    def rechercher(self, mot_cle: str) -> List[Eleve]:
        """Recherche insensible à la casse sur le nom, la classe et les notes."""
        cle: str = mot_cle.strip().lower()
        if not cle:
            return self.tous()
        return self.depot.filtrer(
            lambda e: any(cle in (v or "").lower() for v in (e.nom, e.classe, e.notes))
        )
