"""
app/personas/registry.py

Purpose: Persona lookup

- Maps the route's persona segment to a persona instance
- Credentials come from settings.PERSONA_CREDENTIALS
"""

from typing import Dict, List

from app.core.config import settings
from app.core.exceptions import ResourceNotFoundError
from app.personas import kretes, rexor
from app.personas.base import BotPersona, PersonaCredentials
from app.services.slack_service import slack_service

PERSONA_CLASSES = {
    kretes.KretesPersona.name: kretes.KretesPersona,
    rexor.RexorPersona.name: rexor.RexorPersona,
}

_personas: Dict[str, BotPersona] = {}


def get_persona(name: str) -> BotPersona:
    """
    Returns the persona serving the given route segment.

    Raises:
        ResourceNotFoundError: If no such persona is configured
    """
    persona = _personas.get(name)
    if persona is not None:
        return persona

    persona_class = PERSONA_CLASSES.get(name)
    if persona_class is None or name not in settings.PERSONA_CREDENTIALS:
        raise ResourceNotFoundError(f"Unknown bot '{name}'", details={"persona": name})

    persona = persona_class(
        PersonaCredentials.from_config(name, settings.PERSONA_CREDENTIALS),
        slack_service,
    )
    _personas[name] = persona
    return persona


def tracked_task_ids() -> List[str]:
    """Task ids of all personas, in registration order."""
    return [kretes.TASK_ID, rexor.TASK_ID]


def all_templates() -> Dict[str, dict]:
    """Reply template groups of all personas, keyed by persona name."""
    return {name: persona_class.templates for name, persona_class in PERSONA_CLASSES.items()}
