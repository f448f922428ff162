# comments in English
def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.content == b"ok"


def test_sante_placement(client):
    r = client.get("/placement/sante")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "service": "placement", "version": 1}


def test_unknown_route(client):
    assert client.get("/nowhere/").status_code == 404
