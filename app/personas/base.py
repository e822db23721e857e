"""
app/personas/base.py

Purpose: Bot persona capability

- BotPersona protocol implemented by every bot identity
- Credential names injected from configuration
- Shared slash-command behavior (post to thread or to response URL)
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, runtime_checkable

from app.core.logging import get_logger
from app.services.slack_service import SlackService

logger = get_logger(__name__)


@dataclass(frozen=True)
class PersonaCredentials:
    """Secret names holding a persona's OAuth token and signing secret."""

    oauth_secret_name: str
    signing_secret_name: str

    @classmethod
    def from_config(cls, persona: str, config: Mapping[str, Mapping[str, str]]) -> "PersonaCredentials":
        names = config[persona]
        return cls(oauth_secret_name=names["oauth"], signing_secret_name=names["signing"])


@runtime_checkable
class BotPersona(Protocol):
    """What the dispatcher needs from a bot identity."""

    name: str

    def oauth_credential_name(self) -> str:
        ...

    def signing_secret_name(self) -> str:
        ...

    async def process_direct_message(self, text: str, user_id: str, channel_id: str) -> None:
        ...

    async def process_command(
        self,
        text: str,
        channel_id: str,
        user_id: str,
        response_url: str,
        thread_ts: Optional[str],
    ) -> None:
        ...


async def relay_command_text(
    slack: SlackService,
    credential_name: str,
    text: str,
    channel_id: str,
    response_url: str,
    thread_ts: Optional[str],
) -> None:
    """
    Speaks on behalf of the bot: into the referenced thread when a thread
    timestamp was given, otherwise publicly through the response URL.
    """
    if thread_ts:
        logger.info(f"Posting command text in thread {thread_ts}", extra={"channel_id": channel_id})
        await slack.post_in_thread(text, channel_id, thread_ts, credential_name)
    else:
        logger.info("Posting command text as response", extra={"channel_id": channel_id})
        await slack.post_response(text, response_url, credential_name, ephemeral=False)
