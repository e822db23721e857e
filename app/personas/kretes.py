"""
app/personas/kretes.py

Purpose: Kretes persona

- Tracks "task1": find the people the tunnel tracks lead to
- Answers read from the "kretes-task1-answers" secret
"""

from typing import Optional

from app.flow.game import RiddleGame
from app.personas.base import PersonaCredentials, relay_command_text
from app.services.slack_service import SlackService
from utils.constants import DEFAULT_KEYWORDS, KRETES_MESSAGES
from utils.message_utils import merge_keywords

TASK_ID = "task1"
ANSWERS_SECRET = "kretes-task1-answers"


class KretesPersona:
    name = "kretes"
    templates = KRETES_MESSAGES

    def __init__(self, credentials: PersonaCredentials, slack: SlackService):
        self.credentials = credentials
        self.slack = slack
        self.game = RiddleGame(
            persona=self.name,
            task_id=TASK_ID,
            answers_secret_name=ANSWERS_SECRET,
            oauth_secret_name=credentials.oauth_secret_name,
            templates=self.templates,
            keywords=merge_keywords(DEFAULT_KEYWORDS, {}),
            slack=slack,
        )

    def oauth_credential_name(self) -> str:
        return self.credentials.oauth_secret_name

    def signing_secret_name(self) -> str:
        return self.credentials.signing_secret_name

    async def process_direct_message(self, text: str, user_id: str, channel_id: str) -> None:
        await self.game.process_message(text, user_id, channel_id)

    async def process_command(
        self,
        text: str,
        channel_id: str,
        user_id: str,
        response_url: str,
        thread_ts: Optional[str],
    ) -> None:
        await relay_command_text(
            self.slack, self.oauth_credential_name(), text, channel_id, response_url, thread_ts
        )
