import asyncio

import pytest

from app.core.config import settings
from app.models.user import Language
from app.personas.registry import get_persona
from app.services import user_service
from app.services.user_service import get_user
from conftest import FakeUsersCollection
from utils.constants import KRETES_MESSAGES, REXOR_MESSAGES


def send(persona_name, text, user_id="U100", channel_id="D100"):
    persona = get_persona(persona_name)
    asyncio.run(persona.process_direct_message(text, user_id, channel_id))


def stored(users_collection, user_id="U100"):
    return asyncio.run(get_user(user_id))


def test_first_message_creates_user(users_collection, slack):
    send("kretes", "cześć")

    user = stored(users_collection)
    assert user.id == "U100"
    assert users_collection.documents["U100"]["_id"] == "U100"
    assert user.contact == "u100@example.com"
    assert user.language == Language.POLISH
    assert user.tasks == []
    assert slack.last_text == KRETES_MESSAGES["pl"]["not_understood"]
    assert slack.messages[-1]["channel"] == "D100"
    assert slack.messages[-1]["credential"] == "kretes-oauth-token"


def test_help_with_diacritics(users_collection, slack):
    send("kretes", "POMÓŻ mi, proszę, potrzebuję POMOCY")
    assert slack.last_text == KRETES_MESSAGES["pl"]["help"].format(required=2)


def test_language_switch_toggles_and_persists(users_collection, slack):
    send("kretes", "english please")
    assert stored(users_collection).language == Language.ENGLISH
    assert slack.last_text == KRETES_MESSAGES["en"]["language_switched"]

    send("kretes", "help")
    assert slack.last_text == KRETES_MESSAGES["en"]["help"].format(required=2)

    send("kretes", "po polsku")
    assert stored(users_collection).language == Language.POLISH


def test_language_switch_has_precedence_over_help(users_collection, slack):
    send("kretes", "help, in english")
    assert stored(users_collection).language == Language.ENGLISH
    assert slack.last_text == KRETES_MESSAGES["en"]["language_switched"]


def test_guess_flow_and_status(users_collection, slack):
    send("kretes", "@alice")
    assert slack.last_text == KRETES_MESSAGES["pl"]["too_few"].format(required=2)

    send("kretes", "status")
    assert slack.last_text == KRETES_MESSAGES["pl"]["status_in_progress"].format(attempts=1, guesses="@alice")

    send("kretes", "to chyba @alice i @bob")
    assert slack.last_text == KRETES_MESSAGES["pl"]["solved"].format(attempts=2)

    task = stored(users_collection).get_task("task1")
    assert task.attempts == 2
    assert task.completed_at is not None

    send("kretes", "@alice @bob")
    assert slack.last_text == KRETES_MESSAGES["pl"]["already_completed"]
    assert stored(users_collection).get_task("task1").attempts == 2

    send("kretes", "status")
    assert slack.last_text == KRETES_MESSAGES["pl"]["status_completed"].format(attempts=2)


def test_status_before_any_guess(users_collection, slack):
    send("kretes", "jaki mam postęp?")
    assert slack.last_text == KRETES_MESSAGES["pl"]["status_not_started"]
    assert stored(users_collection).tasks == []


def test_commands_do_not_count_as_attempts(users_collection, slack):
    send("kretes", "@alice")
    for text in ["pomoc", "status", "english", "polski"]:
        send("kretes", text)
    assert stored(users_collection).get_task("task1").attempts == 1


def test_shotgun_guess_flags_user(users_collection, slack):
    send("kretes", "@a @b @c @d")
    user = stored(users_collection)
    assert user.flagged_suspicious is True
    assert slack.last_text == KRETES_MESSAGES["pl"]["too_many"].format(required=2)


def test_withdraw_erases_and_recreates_fresh_user(users_collection, slack):
    send("kretes", "english")
    send("kretes", "@a @b @c")
    assert stored(users_collection).flagged_suspicious is True

    send("kretes", "withdraw")
    assert "U100" not in users_collection.documents
    assert slack.last_text == KRETES_MESSAGES["en"]["withdrawn"]

    send("kretes", "hello?")
    user = stored(users_collection)
    assert user.tasks == []
    assert user.flagged_suspicious is False
    assert user.language == Language.POLISH


def test_personas_track_separate_tasks(users_collection, slack):
    send("kretes", "@alice @bob")
    send("rexor", "@carol @dave @erin")

    user = stored(users_collection)
    assert [task.id for task in user.tasks] == ["task1", "task2"]
    assert all(task.is_completed for task in user.tasks)
    assert slack.last_text == REXOR_MESSAGES["pl"]["solved"].format(attempts=1)
    assert slack.messages[-1]["credential"] == "slack-bot-oaut-token"


def test_rexor_answers_hackerman_with_help(users_collection, slack):
    send("rexor", "kim jest Hackerman?")
    assert slack.last_text == REXOR_MESSAGES["pl"]["help"].format(required=3)


def test_lenient_policy_from_settings(users_collection, slack, monkeypatch):
    monkeypatch.setattr(settings, "GUESS_POLICY", "lenient")
    send("kretes", "@alice")
    assert slack.last_text == KRETES_MESSAGES["pl"]["partial"].format(attempts=1)


def test_missing_answers_secret_aborts_without_reply(users_collection, slack, monkeypatch):
    monkeypatch.delenv("SECRET_KRETES_TASK1_ANSWERS")
    from app.core.exceptions import ExternalServiceError

    with pytest.raises(ExternalServiceError):
        send("kretes", "@alice @bob")
    assert slack.messages == []


class InterleavingUsersCollection(FakeUsersCollection):
    """Gives other tasks a turn between reading and writing a document."""

    async def find_one(self, query):
        await asyncio.sleep(0)
        return await super().find_one(query)

    async def replace_one(self, query, document, upsert=False):
        await asyncio.sleep(0)
        return await super().replace_one(query, document, upsert=upsert)


def send_concurrently(persona_name, texts, user_id="U100", channel_id="D100"):
    persona = get_persona(persona_name)

    async def run():
        await asyncio.gather(*(persona.process_direct_message(text, user_id, channel_id) for text in texts))

    asyncio.run(run())


@pytest.fixture
def interleaving_collection(monkeypatch):
    collection = InterleavingUsersCollection()
    monkeypatch.setattr(user_service, "get_users_collection", lambda: collection)
    return collection


def test_concurrent_guesses_are_serialized(interleaving_collection, slack):
    send("kretes", "pomoc")
    send_concurrently("kretes", ["@alice @carol", "@bob @dave"])

    user = stored(interleaving_collection)
    task = user.get_task("task1")
    assert task.attempts == 2
    assert set(task.guesses) == {"alice", "carol", "bob", "dave"}
    assert len(slack.messages) == 3
    assert user_service._user_locks == {}


def test_concurrent_guesses_race_without_serialization(interleaving_collection, slack, monkeypatch):
    monkeypatch.setattr(settings, "SERIALIZE_USER_UPDATES", False)
    send("kretes", "pomoc")
    send_concurrently("kretes", ["@alice @carol", "@bob @dave"])

    assert stored(interleaving_collection).get_task("task1").attempts == 1
    assert len(slack.messages) == 3
    assert user_service._user_locks == {}
