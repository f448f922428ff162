from __future__ import annotations

import pytest

from placement.charge_utile import construire
from placement.erreurs import ConflitUnicite
from placement.modele.eleve import Eleve


def _payload(*students) -> dict:
    return {"layout": {"name": "Salle", "rows": 2, "cols": 2}, "students": list(students)}


def test_identifiant_en_double_refuse():
    payload = _payload(
        {"id": "a", "name": "Alice", "gender": "female"},
        {"id": "a", "name": "Bruno", "gender": "male"},
    )
    with pytest.raises(ConflitUnicite):
        construire(payload)


@pytest.mark.parametrize("brut, attendu", [
    ("false", False), ("0", False), ("", False), (False, False),
    ("true", True), ("oui", True), (1, True), (True, True),
])
def test_besoins_particuliers_lus_comme_booleen(brut, attendu):
    _entrepot, _grille, eleves, _groupes = construire(
        _payload({"id": "a", "name": "Alice", "gender": "female", "specialNeeds": brut})
    )
    assert eleves[0].besoins_particuliers is attendu


def test_relecture_depuis_dict():
    eleve = Eleve.depuis_dict({"name": "Alice", "gender": "female", "specialNeeds": "false"})
    assert eleve.besoins_particuliers is False
