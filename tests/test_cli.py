from placement.__main__ import main


def _lignes_rangees(sortie: str):
    return [ligne for ligne in sortie.splitlines() if ligne.startswith("rangée ")]


def test_exemple_par_defaut(capsys):
    assert main(["exemple", "--graine", "3"]) == 0
    sortie = capsys.readouterr().out
    assert "=== Salle 102" in sortie
    assert len(_lignes_rangees(sortie)) == 4
    assert "révélation :" in sortie


def test_exemple_deterministe(capsys):
    main(["exemple", "--graine", "5"])
    premier = capsys.readouterr().out
    main(["exemple", "--graine", "5"])
    assert capsys.readouterr().out == premier
    # 19 sièges normaux pour 18 élèves : une seule case vide
    cases = " ".join(_lignes_rangees(premier)).split()
    assert cases.count("-") == 1
    assert cases.count("xx") == 1
