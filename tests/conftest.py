"""
Shared fixtures: secrets in the environment, an in-memory users collection
and a recording stand-in for the outbound Slack calls.
"""

import copy
import json
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import pytest

from app.core.security import compute_signature
from app.services import user_service
from app.services.slack_service import slack_service

KRETES_SIGNING_SECRET = "kretes-signing-value"
REXOR_SIGNING_SECRET = "rexor-signing-value"

SECRETS = {
    "SECRET_KRETES_SIGNING_SECRET": KRETES_SIGNING_SECRET,
    "SECRET_KRETES_OAUTH_TOKEN": "xoxb-kretes",
    "SECRET_SLACK_SIGNING_SECRET": REXOR_SIGNING_SECRET,
    "SECRET_SLACK_BOT_OAUT_TOKEN": "xoxb-rexor",
    "SECRET_KRETES_TASK1_ANSWERS": "alice, @Bob",
    "SECRET_REXOR_TASK2_ANSWERS": "carol,dave,erin",
    "SECRET_COMMAND_AUTHED_USERS": "UADMIN, UOPS",
    "SECRET_COMMAND_TOKEN": "report-token",
}


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents

    async def to_list(self, length=None):
        return list(self.documents)


class FakeDeleteResult:
    def __init__(self, deleted_count: int):
        self.deleted_count = deleted_count


class FakeUsersCollection:
    """The subset of the Motor collection API used by user_service."""

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}

    async def find_one(self, query):
        document = self.documents.get(query["_id"])
        return copy.deepcopy(document)

    async def replace_one(self, query, document, upsert=False):
        if query["_id"] not in self.documents and not upsert:
            return None
        self.documents[query["_id"]] = copy.deepcopy(document)

    async def delete_one(self, query):
        removed = self.documents.pop(query["_id"], None)
        return FakeDeleteResult(1 if removed is not None else 0)

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(doc) for doc in self.documents.values()])


class SlackRecorder:
    """Records outbound Slack calls instead of sending them."""

    def __init__(self):
        self.messages: List[Dict[str, Any]] = []
        self.responses: List[Dict[str, Any]] = []
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.fail_sends = False

    async def post_message(self, text, channel_id, credential_name):
        if self.fail_sends:
            raise RuntimeError("slack is down")
        self.messages.append({"text": text, "channel": channel_id, "thread_ts": None, "credential": credential_name})
        return {"ok": True}

    async def post_in_thread(self, text, channel_id, thread_ts, credential_name):
        self.messages.append({"text": text, "channel": channel_id, "thread_ts": thread_ts, "credential": credential_name})
        return {"ok": True}

    async def post_response(self, text, response_url, credential_name, ephemeral=True):
        self.responses.append({
            "text": text,
            "url": response_url,
            "ephemeral": ephemeral,
            "credential": credential_name,
        })
        return "ok"

    async def fetch_user_profile(self, user_id, credential_name):
        return self.profiles.get(user_id, {"name": user_id.lower(), "profile": {"email": f"{user_id.lower()}@example.com"}})

    @property
    def last_text(self) -> Optional[str]:
        return self.messages[-1]["text"] if self.messages else None


@pytest.fixture(autouse=True)
def secrets_env(monkeypatch):
    for name, value in SECRETS.items():
        monkeypatch.setenv(name, value)
    return SECRETS


@pytest.fixture
def users_collection(monkeypatch):
    collection = FakeUsersCollection()
    monkeypatch.setattr(user_service, "get_users_collection", lambda: collection)
    return collection


@pytest.fixture
def slack(monkeypatch):
    recorder = SlackRecorder()
    for name in ("post_message", "post_in_thread", "post_response", "fetch_user_profile"):
        monkeypatch.setattr(slack_service, name, getattr(recorder, name))
    return recorder


def signed_headers(body: str, secret: str, timestamp: Optional[int] = None, content_type: str = "application/json") -> Dict[str, str]:
    timestamp = str(int(time.time()) if timestamp is None else timestamp)
    return {
        "X-Signing-Timestamp": timestamp,
        "X-Signature": compute_signature(timestamp, body, secret),
        "Content-Type": content_type,
    }


def message_event(text: str, user: str = "U100", channel: str = "D100", **extra) -> str:
    event = {"type": "message", "text": text, "user": user, "channel": channel}
    event.update(extra)
    return json.dumps({"type": "event_callback", "event": event})


def command_form(text: str, user_id: str = "UADMIN", channel_id: str = "C200",
                 response_url: str = "https://hooks.slack.com/commands/T1/1/abc") -> str:
    return urlencode({
        "user_id": user_id,
        "text": text,
        "channel_id": channel_id,
        "response_url": response_url,
        "command": "/kretes",
    })
