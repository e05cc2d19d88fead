"""
OrganiJob - Message generation service.

Builds ready-to-send French messages and action plans for the job search
from a goal (`objectif`), a target field (`domaine`) and optional context.
Pure string templates; no external AI call is made.
"""
from typing import Callable, Dict, Optional

FALLBACK_MESSAGE = "Aucune suggestion disponible."


def _relance(domaine: str, contexte: str) -> str:
    context_line = f"Contexte: {contexte}." if contexte else ""
    return (
        f"Objet: Relance candidature {domaine or 'poste cible'}\n\n"
        "Bonjour,\n"
        "Je me permets de revenir vers vous suite a notre echange. "
        f"Je reste tres motive(e) pour contribuer sur des missions en {domaine or 'lien avec mon profil'}. "
        f"{context_line}\n"
        "Auriez-vous une visibilite sur la suite du processus ?\n\n"
        "Merci pour votre retour."
    )


def _motivation(domaine: str, contexte: str) -> str:
    return (
        "Plan anti-demotivation (7 jours):\n"
        f"1) 2 candidatures qualitatives ciblees {f'en {domaine}' if domaine else ''}.\n"
        "2) 1 prise de contact reseau par jour.\n"
        "3) 1 bloc de formation de 45 minutes.\n"
        "4) Bilan chaque soir: ce qui a marche et prochaine micro-action.\n"
        f"{f'Point de depart: {contexte}.' if contexte else ''}"
    )


def _organisation(domaine: str, contexte: str) -> str:
    return (
        "Semaine structuree:\n"
        f"- Lundi/Mardi: candidatures ciblees {f'({domaine})' if domaine else ''}.\n"
        "- Mercredi: suivi des relances et appels.\n"
        "- Jeudi: simulation d'entretien + optimisation CV.\n"
        "- Vendredi: reseau + veille d'offres.\n"
        f"{f'Ajustement: {contexte}.' if contexte else ''}"
    )


def _reseau(domaine: str, contexte: str) -> str:
    return (
        "Message reseau court:\n"
        f"\"Bonjour, je recherche actuellement une opportunite {f'en {domaine}' if domaine else ''}. "
        "Si vous avez 10 minutes cette semaine, j'aimerais beneficier de votre retour terrain. "
        f"{f'Contexte: {contexte}.' if contexte else ''} Merci d'avance.\""
    )


TEMPLATES: Dict[str, Callable[[str, str], str]] = {
    "relance": _relance,
    "motivation": _motivation,
    "organisation": _organisation,
    "reseau": _reseau,
}


def generate_message(objectif: Optional[str], domaine: Optional[str] = "", contexte: Optional[str] = "") -> str:
    """
    Generate the message for a goal.

    Available goals:
    - relance      - follow-up email after an application or call
    - motivation   - 7-day plan against loss of motivation
    - organisation - structured week of job searching
    - reseau       - short networking message

    Unknown goals return FALLBACK_MESSAGE.
    """
    generator = TEMPLATES.get(objectif or "")
    if generator is None:
        return FALLBACK_MESSAGE
    return generator((domaine or "").strip(), (contexte or "").strip())


def get_objectives() -> list:
    return list(TEMPLATES.keys())
