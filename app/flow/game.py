"""
app/flow/game.py

Purpose: Riddle game logic shared by the personas

- Recognises keyword groups in a direct message
  (language switch > help > withdraw > status), matched on folded text
- Falls through to the task state machine for guesses
- Picks the localized reply and sends it to the conversation
- Persists the whole user document after every change
"""

from typing import Mapping, Optional, Sequence

from app.core.config import settings
from app.core.logging import get_logger, LogContext
from app.flow.states import GuessOutcome, GuessPolicy, TaskState
from app.flow.task_machine import normalize_answers, submit_guess
from app.models.user import User
from app.services import user_service
from app.services.secret_service import get_secret_list
from app.services.slack_service import SlackService
from utils.constants import (
    KEYWORD_HELP,
    KEYWORD_LANGUAGE_SWITCH,
    KEYWORD_PRECEDENCE,
    KEYWORD_STATUS,
    KEYWORD_WITHDRAW,
    NO_GUESSES_PLACEHOLDER,
)
from utils.message_utils import contains_any, fold_text, render

logger = get_logger(__name__)

OUTCOME_MESSAGE_KEYS = {
    GuessOutcome.ALREADY_COMPLETED: "already_completed",
    GuessOutcome.NO_GUESS: "not_understood",
    GuessOutcome.TOO_FEW_HANDLES: "too_few",
    GuessOutcome.TOO_MANY_HANDLES: "too_many",
    GuessOutcome.PARTIAL_MATCH: "partial",
    GuessOutcome.SOLVED: "solved",
}

STATUS_MESSAGE_KEYS = {
    TaskState.NOT_STARTED: "status_not_started",
    TaskState.IN_PROGRESS: "status_in_progress",
    TaskState.COMPLETED: "status_completed",
}


class RiddleGame:
    """
    One tracked task played over direct messages.

    Args:
        persona: Persona name (for logging)
        task_id: Tracked task identifier, e.g. "task1"
        answers_secret_name: Secret holding the comma separated answer handles
        oauth_secret_name: Secret holding the persona bot token
        templates: language -> key -> template
        keywords: keyword group -> folded keywords
        slack: Outbound Slack client
    """

    def __init__(
        self,
        persona: str,
        task_id: str,
        answers_secret_name: str,
        oauth_secret_name: str,
        templates: Mapping[str, Mapping[str, str]],
        keywords: Mapping[str, Sequence[str]],
        slack: SlackService,
    ):
        self.persona = persona
        self.task_id = task_id
        self.answers_secret_name = answers_secret_name
        self.oauth_secret_name = oauth_secret_name
        self.templates = templates
        self.keywords = keywords
        self.slack = slack

    def match_keyword(self, folded_text: str) -> Optional[str]:
        """Returns the first keyword group (by precedence) found in the text."""
        for group in KEYWORD_PRECEDENCE:
            if contains_any(folded_text, self.keywords.get(group, ())):
                return group
        return None

    async def required_answers(self):
        return normalize_answers(await get_secret_list(self.answers_secret_name))

    def reply(self, user: User, key: str, **values) -> str:
        return render(self.templates, user.language.value, key, **values)

    async def process_message(self, text: str, user_id: str, channel_id: str) -> str:
        """
        Handles one direct message and sends the reply.

        Returns:
            The reply text that was sent
        """
        with LogContext(persona=self.persona, user_id=user_id, task_id=self.task_id):
            async with user_service.user_lock(user_id):
                reply = await self._apply(text or "", user_id)

            await self.slack.post_message(reply, channel_id, self.oauth_secret_name)
            return reply

    async def _apply(self, text: str, user_id: str) -> str:
        user = await user_service.get_or_create_user(user_id, self.oauth_secret_name)
        group = self.match_keyword(fold_text(text))

        if group == KEYWORD_LANGUAGE_SWITCH:
            user.language = user.language.toggled()
            await user_service.save_user(user)
            logger.info(f"Language switched to {user.language.value}")
            return self.reply(user, "language_switched")

        if group == KEYWORD_HELP:
            answers = await self.required_answers()
            return self.reply(user, "help", required=len(answers))

        if group == KEYWORD_WITHDRAW:
            # Reply is rendered first, the language is gone with the document
            farewell = self.reply(user, "withdrawn")
            await user_service.delete_user(user.id)
            return farewell

        if group == KEYWORD_STATUS:
            return self.status_reply(user)

        answers = await self.required_answers()
        policy = GuessPolicy(settings.GUESS_POLICY)
        outcome = submit_guess(user, self.task_id, text, answers, policy=policy)

        if outcome.counts_as_attempt:
            await user_service.save_user(user)

        task = user.get_task(self.task_id)
        return self.reply(
            user,
            OUTCOME_MESSAGE_KEYS[outcome],
            attempts=task.attempts if task else 0,
            required=len(answers),
        )

    def status_reply(self, user: User) -> str:
        task = user.get_task(self.task_id)
        state = TaskState.of(task)
        guesses = ", ".join(f"@{guess}" for guess in task.guesses) if task and task.guesses else NO_GUESSES_PLACEHOLDER
        return self.reply(
            user,
            STATUS_MESSAGE_KEYS[state],
            attempts=task.attempts if task else 0,
            guesses=guesses,
        )
