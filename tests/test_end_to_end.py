import json

import pytest
from django.test import Client


@pytest.fixture(autouse=True)
def _force_celery_eager(settings):
    # Celery 5 names
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True
    settings.CELERY_TASK_STORE_EAGER_RESULT = True

    # broker et backend de résultats en mémoire
    settings.CELERY_BROKER_URL = "memory://"
    settings.CELERY_RESULT_BACKEND = "cache+memory://"


def _payload(**extra) -> dict:
    payload = {
        "layout": {"name": "Salle test", "rows": 2, "cols": 2},
        "students": [
            {"id": "a", "name": "Alice", "gender": "female"},
            {"id": "b", "name": "Bruno", "gender": "male"},
            {"id": "c", "name": "Chloé", "gender": "female"},
            {"id": "d", "name": "David", "gender": "male"},
        ],
        "seed": 7,
    }
    payload.update(extra)
    return payload


def _post_start(client: Client, payload: dict) -> str:
    r = client.post("/placement/remplir/start", data=json.dumps(payload), content_type="application/json")
    assert r.status_code == 200, r.content
    task_id = r.json()["task_id"]
    assert isinstance(task_id, str)
    return task_id


def _get_status(client: Client, task_id: str) -> dict:
    r = client.get(f"/placement/remplir/status/{task_id}")
    assert r.status_code == 200
    return r.json()


def test_remplissage_aleatoire_de_bout_en_bout():
    client = Client()
    data = _get_status(client, _post_start(client, _payload()))
    assert data.get("status") == "SUCCESS", data
    assignments = data["record"]["assignments"]
    assert len(assignments) == 4
    assert {a["studentId"] for a in assignments} == {"a", "b", "c", "d"}
    assert data["valid"] is True
    assert data["unplaced"] == [] and data["freeSeats"] == []


def test_remplissage_mixte_sans_violation():
    client = Client()
    payload = _payload(strategy="mixed", constraintPolicy="mixed_gender", assignments={"siege_0_0": "a"})
    data = _get_status(client, _post_start(client, payload))
    assert data.get("status") == "SUCCESS", data
    par_siege = {a["seatId"]: a["studentId"] for a in data["record"]["assignments"]}
    assert par_siege["siege_0_0"] == "a"
    assert data["record"]["strategy"] == "mixed"
    assert data["violations"] == []


def test_groupe_et_siege_special():
    client = Client()
    payload = _payload(
        layout={"name": "Salle test", "rows": 2, "cols": 3, "specialSeats": ["siege_0_2"]},
        groups=[{"name": "Binôme", "studentIds": ["a", "b"]}],
    )
    data = _get_status(client, _post_start(client, payload))
    assert data.get("status") == "SUCCESS", data
    par_siege = {a["seatId"]: a["studentId"] for a in data["record"]["assignments"]}
    # le siège spécial reste vide ; le binôme est côte à côte
    assert "siege_0_2" not in par_siege
    sieges_binome = sorted(s for s, e in par_siege.items() if e in ("a", "b"))
    assert sieges_binome in (["siege_0_0", "siege_0_1"], ["siege_1_0", "siege_1_1"], ["siege_1_1", "siege_1_2"])


def test_charge_utile_incomplete_donne_un_echec():
    client = Client()
    data = _get_status(client, _post_start(client, {"students": []}))
    assert data["status"] == "FAILURE"
    assert "layout" in data["error"]

    data = _get_status(client, _post_start(client, _payload(strategy="glouton")))
    assert data["status"] == "FAILURE"


def test_json_invalide_refuse():
    client = Client()
    r = client.post("/placement/remplir/start", data="{pas du json", content_type="application/json")
    assert r.status_code == 400
    assert r.json()["errors"] == ["JSON invalide"]
    assert client.get("/placement/remplir/start").status_code == 405


def test_revelation_directe():
    client = Client()
    body = {
        "mode": "direct",
        "speed": 500,
        "students": _payload()["students"],
        "assignments": [{"seatId": "siege_0_1", "studentId": "b"}, {"seatId": "siege_0_0", "studentId": "a"}],
    }
    r = client.post("/placement/revelation", data=json.dumps(body), content_type="application/json")
    assert r.status_code == 200, r.content
    data = r.json()
    assert [f["studentName"] for f in data["frames"]] == ["Alice", "Bruno"]
    assert [f["delay"] for f in data["frames"]] == [0, 500]
    assert data["duration_ms"] == 1500


def test_revelation_parametres_invalides():
    client = Client()
    body = {"mode": "lottery", "speed": -1, "students": [], "assignments": []}
    r = client.post("/placement/revelation", data=json.dumps(body), content_type="application/json")
    assert r.status_code == 400
    body = {"mode": "ralenti", "students": [], "assignments": []}
    r = client.post("/placement/revelation", data=json.dumps(body), content_type="application/json")
    assert r.status_code == 400


def test_recommandation():
    client = Client()
    body = {"students": _payload()["students"], "groupCount": 2, "groupConstraint": "mixed_gender", "seed": 3}
    r = client.post("/placement/recommandation", data=json.dumps(body), content_type="application/json")
    assert r.status_code == 200, r.content
    data = r.json()
    assert data["policy"] == "mixed_gender"
    assert len(data["groups"]["groups"]) == 2
    assert data["groups"]["coverage"] == 1.0


def test_identifiant_en_double_donne_un_echec():
    client = Client()
    students = _payload()["students"] + [{"id": "a", "name": "Albane", "gender": "female"}]
    data = _get_status(client, _post_start(client, _payload(students=students)))
    assert data["status"] == "FAILURE"
    assert "'a'" in data["error"]


def test_revelation_melanges_non_entier_refuse():
    client = Client()
    body = {"mode": "lottery", "shuffleCount": 2.5, "students": _payload()["students"],
            "assignments": {"siege_0_0": "a"}}
    r = client.post("/placement/revelation", data=json.dumps(body), content_type="application/json")
    assert r.status_code == 400
    assert r.json()["errors"] == ["Le nombre de mélanges doit être un entier"]
