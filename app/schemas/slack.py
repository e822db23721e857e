"""
app/schemas/slack.py

Purpose: Slack webhook payload schemas

- Events API envelopes (url_verification / event_callback)
- Message events
- Slash-command form payloads
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional


ENVELOPE_URL_VERIFICATION = "url_verification"
ENVELOPE_EVENT_CALLBACK = "event_callback"
EVENT_MESSAGE = "message"


class MessageEvent(BaseModel):
    """
    Inner event of an event_callback envelope.
    Only "message" events are acted upon.
    """
    model_config = ConfigDict(extra="allow")

    type: str = ""
    text: Optional[str] = None
    user: Optional[str] = None
    channel: Optional[str] = None
    bot_id: Optional[str] = None
    subtype: Optional[str] = None

    @property
    def is_from_bot(self) -> bool:
        return self.bot_id is not None or self.subtype == "bot_message"


class EventEnvelope(BaseModel):
    """
    Top-level Events API payload

    {
        "type": "event_callback",
        "event": {"type": "message", "user": "U123", "text": "...", "channel": "D123"}
    }
    """
    model_config = ConfigDict(extra="allow")

    type: str = ""
    challenge: Optional[str] = None
    # Kept raw, other event types carry objects in "user" or "channel"
    event: Optional[Dict[str, Any]] = None

    @property
    def event_type(self) -> Optional[str]:
        return self.event.get("type") if self.event else None


class CommandPayload(BaseModel):
    """Slash-command form fields used by the bot."""
    model_config = ConfigDict(extra="ignore")

    user_id: str = ""
    text: str = ""
    channel_id: str = ""
    response_url: str = ""
    command: Optional[str] = Field(default=None, description="e.g. /kretes")
