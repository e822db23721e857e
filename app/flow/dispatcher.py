"""
app/flow/dispatcher.py

Purpose: Central Slack request dispatcher

- Phase 1 (before responding): verify the request signature, decide the ACK
- Phase 2 (after the ACK, in the background): route the event or command
  to the persona and let it reply
- Phase 2 failures are logged and swallowed; Slack already got its 200
"""

import json
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import parse_qs

from fastapi import BackgroundTasks, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import (
    ExternalServiceError,
    NotAuthorizedError,
    SignatureVerificationError,
    ValidationError,
)
from app.core.logging import get_logger, LogContext
from app.core.security import SIGNATURE_HEADERS, TIMESTAMP_HEADERS, first_header, verify_signature
from app.models.user import Language
from app.personas.base import BotPersona
from app.schemas.slack import (
    ENVELOPE_EVENT_CALLBACK,
    ENVELOPE_URL_VERIFICATION,
    EVENT_MESSAGE,
    CommandPayload,
    EventEnvelope,
    MessageEvent,
)
from app.services.secret_service import get_secret, get_secret_list
from app.services.slack_service import slack_service
from utils.constants import COMMAND_MESSAGES
from utils.message_utils import render
from utils.slack_utils import extract_thread_reference

logger = get_logger(__name__)


async def run_detached(label: str, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> None:
    """
    Runs post-ACK work; any error ends up in the log only.
    """
    try:
        await func(*args, **kwargs)
    except Exception as e:
        logger.error(f"❌ Background {label} failed: {e}", exc_info=True)


async def authenticate(persona: BotPersona, request: Request) -> str:
    """
    Reads the raw body and verifies its signature.

    Returns:
        Raw body as text

    Raises:
        SignatureVerificationError: On a missing, stale or wrong signature
    """
    raw_body = (await request.body()).decode("utf-8")

    signing_secret = ""
    if settings.VERIFY_SIGNATURES:
        try:
            signing_secret = await get_secret(persona.signing_secret_name())
        except ExternalServiceError as e:
            logger.error(f"Signing secret unavailable for {persona.name}: {e.message}")
            raise SignatureVerificationError("Request signature could not be verified") from e

    ok = verify_signature(
        first_header(request.headers, TIMESTAMP_HEADERS),
        raw_body,
        first_header(request.headers, SIGNATURE_HEADERS),
        signing_secret,
    )
    if not ok:
        raise SignatureVerificationError()

    return raw_body


def parse_event(raw_body: str) -> EventEnvelope:
    try:
        return EventEnvelope.model_validate(json.loads(raw_body or "{}"))
    except (ValueError, PydanticValidationError) as e:
        raise ValidationError("Invalid event payload") from e


def message_event_of(envelope: EventEnvelope) -> Optional[MessageEvent]:
    """
    The inner "message" event of an event_callback, or None.

    Message events that do not fit the plain message shape count as None.
    """
    if envelope.type != ENVELOPE_EVENT_CALLBACK or envelope.event_type != EVENT_MESSAGE:
        return None
    try:
        return MessageEvent.model_validate(envelope.event)
    except PydanticValidationError:
        logger.debug("Ignoring message event with an unexpected shape")
        return None


def parse_command(raw_body: str) -> CommandPayload:
    fields = {key: values[0] for key, values in parse_qs(raw_body, keep_blank_values=True).items()}
    return CommandPayload.model_validate(fields)


async def handle_event(persona: BotPersona, request: Request, background_tasks: BackgroundTasks) -> Response:
    """
    Events API endpoint logic.

    Responds immediately (echoing the challenge for url_verification) and
    schedules direct-message processing for user-sent "message" events.
    Every other envelope or event type is ignored.
    """
    raw_body = await authenticate(persona, request)
    envelope = parse_event(raw_body)

    logger.info(f"📨 {persona.name} event received: {envelope.type}")

    if envelope.type == ENVELOPE_URL_VERIFICATION:
        return JSONResponse(status_code=200, content={"challenge": envelope.challenge})

    event = message_event_of(envelope)
    if event is not None and not event.is_from_bot and event.user:
        background_tasks.add_task(
            run_detached,
            "direct message",
            persona.process_direct_message,
            event.text or "",
            event.user,
            event.channel or "",
        )
    else:
        logger.debug(f"Ignoring {envelope.type} / {envelope.event_type}")

    return JSONResponse(status_code=200, content={})


async def handle_command(persona: BotPersona, request: Request, background_tasks: BackgroundTasks) -> Response:
    """
    Slash-command endpoint logic.

    Responds with an empty 200 right after verification; authorization,
    parsing and the persona action run in the background.
    """
    raw_body = await authenticate(persona, request)
    payload = parse_command(raw_body)

    logger.info(f"📨 {persona.name} command received", extra={"user_id": payload.user_id})

    background_tasks.add_task(run_detached, "command", process_command_request, persona, payload)
    return Response(status_code=200)


async def require_authorized(user_id: str) -> None:
    """
    Raises:
        NotAuthorizedError: If the user is not on the command allow-list
    """
    authorized_users = await get_secret_list(settings.AUTHORIZED_USERS_SECRET)
    if user_id not in authorized_users:
        raise NotAuthorizedError(f"User {user_id} is not on the command allow-list")


async def process_command_request(persona: BotPersona, payload: CommandPayload) -> Optional[str]:
    """
    Post-ACK part of a slash command.

    Returns:
        The thread timestamp the command was routed to, if any
    """
    with LogContext(persona=persona.name, user_id=payload.user_id):
        credential = persona.oauth_credential_name()
        language = Language.primary().value

        try:
            await require_authorized(payload.user_id)
        except NotAuthorizedError as e:
            logger.warning(f"Command rejected: {e.message}")
            await slack_service.post_response(
                render(COMMAND_MESSAGES, language, "not_authorized"),
                payload.response_url,
                credential,
            )
            return None

        # Emptiness is checked after the permalink is removed, so a bare
        # permalink counts as empty text
        text, thread_ts = extract_thread_reference(payload.text, settings.SLACK_DOMAIN)

        if not text or not text.strip():
            logger.info("Command rejected: empty text")
            await slack_service.post_response(
                render(COMMAND_MESSAGES, language, "text_required"),
                payload.response_url,
                credential,
            )
            return None

        await persona.process_command(
            text,
            payload.channel_id,
            payload.user_id,
            payload.response_url,
            thread_ts,
        )
        return thread_ts
