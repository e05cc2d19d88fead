"""
Tools, health check and static front-end tests.
"""
import pytest

from app.services.message_generator import generate_message, FALLBACK_MESSAGE
from app.services.resources import search_formations, search_services


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


# --- Message generator ---

def test_relance_message_uses_domain_and_context():
    message = generate_message("relance", "data", "entretien le 3 mars")

    assert message.startswith("Objet: Relance candidature data")
    assert "missions en data" in message
    assert "Contexte: entretien le 3 mars." in message


def test_relance_message_defaults_without_domain():
    message = generate_message("relance")

    assert "Relance candidature poste cible" in message
    assert "lien avec mon profil" in message
    assert "Contexte" not in message


@pytest.mark.parametrize("objectif", ["motivation", "organisation", "reseau"])
def test_every_objective_produces_a_message(objectif):
    message = generate_message(objectif, "marketing", "")

    assert message != FALLBACK_MESSAGE
    assert "marketing" in message


def test_unknown_objective_falls_back():
    assert generate_message("inconnu", "x", "y") == FALLBACK_MESSAGE
    assert generate_message(None) == FALLBACK_MESSAGE


def test_message_endpoint(client):
    response = client.post(
        "/api/tools/message",
        json={"objectif": "reseau", "domaine": "UX design", "contexte": ""},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["objectif"] == "reseau"
    assert data["message"].startswith("Message reseau court:")
    assert "en UX design" in data["message"]


def test_objectives_endpoint(client):
    response = client.get("/api/tools/objectives")

    assert response.json() == ["relance", "motivation", "organisation", "reseau"]


# --- Directories ---

def test_search_formations_filters_by_keyword_and_city():
    assert len(search_formations()) == 6
    assert [f["titre"] for f in search_formations(keyword="web")] == ["Bootcamp Developpement Web"]
    assert [f["ville"] for f in search_formations(city="  LYON ")] == ["Lyon"]
    assert search_formations(keyword="web", city="paris") == []


def test_search_services_filters_by_city():
    assert len(search_services()) == 6
    assert [s["nom"] for s in search_services("lille")] == ["Cap Emploi"]
    assert search_services("Brest") == []


def test_formations_endpoint(client):
    response = client.get("/api/tools/formations", params={"motCle": "design"})

    assert response.status_code == 200
    assert response.json() == [
        {"titre": "UX/UI Design", "ville": "Toulouse", "duree": "9 semaines", "niveau": "Intermediaire"}
    ]


def test_services_endpoint(client):
    response = client.get("/api/tools/services", params={"ville": "toulouse"})

    assert [s["type"] for s in response.json()] == ["Inclusion"]


# --- Static front-end ---

def test_root_serves_index(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "<h1>OrganiJob</h1>" in response.text


def test_static_file_is_served(client):
    response = client.get("/app.js")

    assert response.status_code == 200
    assert "console.log" in response.text


def test_missing_static_file_is_not_found(client):
    assert client.get("/nope.css").status_code == 404


def test_static_files_stay_inside_public_dir(client):
    response = client.get("/..%2fsecret.txt")

    assert response.status_code == 404
    assert "top secret" not in response.text
