"""
OrganiJob - Canned directories of trainings and support services.

Static lists shown on the "Formations" and "Accompagnement" tabs, with
case-insensitive substring filtering.
"""
from typing import Dict, List, Optional

FORMATIONS: List[Dict[str, str]] = [
    {"titre": "Initiation Data Analyst", "ville": "Paris", "duree": "8 semaines", "niveau": "Debutant"},
    {"titre": "Bootcamp Developpement Web", "ville": "Lyon", "duree": "12 semaines", "niveau": "Intermediaire"},
    {"titre": "Marketing Digital Inclusif", "ville": "Lille", "duree": "6 semaines", "niveau": "Tous niveaux"},
    {"titre": "Anglais Professionnel", "ville": "Marseille", "duree": "10 semaines", "niveau": "Debutant"},
    {"titre": "UX/UI Design", "ville": "Toulouse", "duree": "9 semaines", "niveau": "Intermediaire"},
    {"titre": "Bureautique et gestion de projet", "ville": "Nantes", "duree": "5 semaines", "niveau": "Debutant"},
]

SERVICES: List[Dict[str, str]] = [
    {"nom": "France Travail - Accompagnement renforce", "ville": "Paris", "type": "Public", "contact": "3949"},
    {"nom": "Mission Locale Metropole", "ville": "Lyon", "type": "Jeunes", "contact": "mission-locale.example"},
    {"nom": "Cap Emploi", "ville": "Lille", "type": "Handicap", "contact": "cap-emploi.example"},
    {"nom": "Maison de l Emploi", "ville": "Marseille", "type": "Orientation", "contact": "maison-emploi.example"},
    {"nom": "CIDFF - Accompagnement femmes", "ville": "Toulouse", "type": "Inclusion", "contact": "cidff.example"},
    {"nom": "Club Recherche Emploi", "ville": "Nantes", "type": "Associatif", "contact": "club-emploi.example"},
]


def _matches(value: str, needle: str) -> bool:
    return not needle or needle in value.lower()


def search_formations(keyword: Optional[str] = None, city: Optional[str] = None) -> List[Dict[str, str]]:
    """Trainings whose title contains `keyword` and whose city contains `city`."""
    keyword = (keyword or "").strip().lower()
    city = (city or "").strip().lower()
    return [
        f for f in FORMATIONS
        if _matches(f["titre"], keyword) and _matches(f["ville"], city)
    ]


def search_services(city: Optional[str] = None) -> List[Dict[str, str]]:
    """Support services located in a city containing `city`."""
    city = (city or "").strip().lower()
    return [s for s in SERVICES if _matches(s["ville"], city)]
