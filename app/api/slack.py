"""
app/api/slack.py

Purpose: Slack webhook endpoints

- POST /{persona}/events   Events API (JSON, signed)
- POST /{persona}/command  Slash commands (form encoded, signed)
- Resolves the persona and hands over to the flow dispatcher
"""

from fastapi import APIRouter, BackgroundTasks, Request

from app.core.logging import get_logger
from app.flow.dispatcher import handle_command, handle_event
from app.personas.registry import get_persona

logger = get_logger(__name__)
router = APIRouter()


@router.post("/{persona_name}/events")
async def events_handler(persona_name: str, request: Request, background_tasks: BackgroundTasks):
    """
    Events API endpoint.

    Answers url_verification with the challenge and every other envelope
    with an empty 200; message processing happens after the response.
    """
    persona = get_persona(persona_name)
    return await handle_event(persona, request, background_tasks)


@router.post("/{persona_name}/command")
async def command_handler(persona_name: str, request: Request, background_tasks: BackgroundTasks):
    """
    Slash-command endpoint.

    Always answers an empty 200 once the signature is valid; replies go
    through the command's response_url or the Web API.
    """
    persona = get_persona(persona_name)
    return await handle_command(persona, request, background_tasks)
