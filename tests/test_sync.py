"""
Sync API tests: pull, full-replace push, sanitization and export.
"""
from conftest import auth_headers, register


def contact(**overrides):
    data = {
        "id": "c-1",
        "nom": "Claire Martin",
        "organisation": "France Travail",
        "dateAppel": "2024-03-05T10:00:00.000Z",
        "expertise": "Recrutement tech",
        "inclusivite": "Handicap, diversite",
        "notes": "Rappeler en avril",
    }
    data.update(overrides)
    return data


def push(client, token, contacts):
    return client.put("/api/sync", json={"contacts": contacts}, headers=auth_headers(token))


def pull(client, token):
    response = client.get("/api/sync", headers=auth_headers(token))
    assert response.status_code == 200, response.text
    return response.json()


def test_sync_requires_authentication(client):
    assert client.get("/api/sync").status_code == 401
    response = client.put("/api/sync", json={"contacts": []})
    assert response.status_code == 401
    assert response.json() == {"error": "Non autorise."}


def test_pull_empty(client, token):
    data = pull(client, token)

    assert data["contacts"] == []
    assert data["user"]["email"] == "alice@example.com"
    assert data["syncedAt"].endswith("Z")


def test_push_then_pull_returns_pushed_set(client, token):
    response = push(client, token, [contact()])

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["count"] == 1
    assert body["syncedAt"].endswith("Z")

    contacts = pull(client, token)["contacts"]
    assert len(contacts) == 1
    stored = contacts[0]
    assert stored["id"] == "c-1"
    assert stored["userId"] == pull(client, token)["user"]["id"]
    assert stored["nom"] == "Claire Martin"
    assert stored["organisation"] == "France Travail"
    assert stored["dateAppel"] == "2024-03-05T10:00:00.000Z"
    assert stored["expertise"] == "Recrutement tech"
    assert stored["inclusivite"] == "Handicap, diversite"
    assert stored["notes"] == "Rappeler en avril"
    assert stored["updatedAt"].endswith("Z")


def test_pull_orders_by_call_date_descending(client, token):
    push(client, token, [
        contact(id="jan", dateAppel="2024-01-10T09:00:00.000Z"),
        contact(id="mar", dateAppel="2024-03-10T09:00:00.000Z"),
        contact(id="feb", dateAppel="2024-02-10T09:00:00.000Z"),
    ])

    ids = [c["id"] for c in pull(client, token)["contacts"]]

    assert ids == ["mar", "feb", "jan"]


def test_push_replaces_whole_set(client, token):
    push(client, token, [contact(id="a"), contact(id="b")])
    push(client, token, [contact(id="c")])

    ids = [c["id"] for c in pull(client, token)["contacts"]]

    assert ids == ["c"]


def test_push_empty_list_clears_contacts(client, token):
    push(client, token, [contact()])

    response = push(client, token, [])

    assert response.json()["count"] == 0
    assert pull(client, token)["contacts"] == []


def test_invalid_contacts_are_dropped(client, token):
    response = push(client, token, [
        contact(id="ok"),
        contact(id="no-name", nom="   "),
        contact(id="no-org", organisation=None),
        contact(id="no-date", dateAppel=""),
        contact(id="bad-date", dateAppel="pas une date"),
        "not an object",
    ])

    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert [c["id"] for c in pull(client, token)["contacts"]] == ["ok"]


def test_push_sanitizes_fields(client, token):
    raw = contact(nom="  Claire  ", expertise=None, notes=None)
    del raw["id"]
    del raw["inclusivite"]

    push(client, token, [raw])

    stored = pull(client, token)["contacts"][0]
    assert stored["id"]
    assert stored["nom"] == "Claire"
    assert stored["expertise"] == ""
    assert stored["inclusivite"] == ""
    assert stored["notes"] == ""


def test_push_normalizes_dates_to_utc(client, token):
    push(client, token, [
        contact(id="local", dateAppel="2024-03-05T10:30"),
        contact(id="offset", dateAppel="2024-03-04T12:00:00+02:00"),
    ])

    dates = {c["id"]: c["dateAppel"] for c in pull(client, token)["contacts"]}

    assert dates == {
        "local": "2024-03-05T10:30:00.000Z",
        "offset": "2024-03-04T10:00:00.000Z",
    }


def test_push_without_contacts_array_is_rejected(client, token):
    for body in ({}, {"contacts": "nope"}, {"contacts": {"id": "x"}}, []):
        response = client.put("/api/sync", json=body, headers=auth_headers(token))
        assert response.status_code == 400
        assert response.json() == {"error": "Format invalide: contacts attendus."}


def test_push_with_duplicate_ids_keeps_previous_set(client, token):
    push(client, token, [contact(id="keep")])

    response = push(client, token, [contact(id="dup"), contact(id="dup", nom="Autre")])

    assert response.status_code == 400
    assert response.json() == {"error": "Requete invalide."}
    assert [c["id"] for c in pull(client, token)["contacts"]] == ["keep"]


def test_users_only_see_their_own_contacts(client):
    alice = register(client, "alice@example.com")
    bob = register(client, "bob@example.com")

    push(client, alice, [contact(id="shared-id", nom="Pour Alice")])
    push(client, bob, [contact(id="shared-id", nom="Pour Bob")])
    push(client, bob, [])

    contacts = pull(client, alice)["contacts"]
    assert [c["nom"] for c in contacts] == ["Pour Alice"]
    assert pull(client, bob)["contacts"] == []


def test_contacts_survive_relogin(client, token):
    push(client, token, [contact()])

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "motdepasse123"})
    new_token = response.json()["token"]

    assert [c["id"] for c in pull(client, new_token)["contacts"]] == ["c-1"]


def test_export_downloads_contacts(client, token):
    push(client, token, [contact()])

    response = client.get("/api/sync/export", headers=auth_headers(token))

    assert response.status_code == 200
    assert "contacts-organijob.json" in response.headers["content-disposition"]
    exported = response.json()
    assert len(exported) == 1
    assert exported[0]["nom"] == "Claire Martin"
    assert exported[0]["dateAppel"] == "2024-03-05T10:00:00.000Z"


def test_dates_out_of_range_are_dropped(client, token):
    response = push(client, token, [
        contact(id="ok"),
        contact(id="too-early", dateAppel="0001-01-01T00:00:00+01:00"),
        contact(id="too-late", dateAppel="9999-12-31T23:00:00-02:00"),
        contact(id="compact", dateAppel=20240305),
    ])

    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert [c["id"] for c in pull(client, token)["contacts"]] == ["ok"]


def test_malformed_push_without_token_is_unauthorized(client):
    response = client.put(
        "/api/sync",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Non autorise."}


def test_malformed_push_is_bad_request(client, token):
    headers = {**auth_headers(token), "Content-Type": "application/json"}

    response = client.put("/api/sync", content="{not json", headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Requete invalide."}

    response = client.put("/api/sync", headers=auth_headers(token))
    assert response.status_code == 400
    assert response.json() == {"error": "Format invalide: contacts attendus."}
