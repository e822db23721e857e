"""
app/models/user.py

Purpose: User document model

- Slack user id (also the MongoDB _id)
- Contact (email or username) and preferred language
- Suspicion flag raised by the guess evaluation
- Embedded task progress records
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator


class Language(str, Enum):
    """The two supported reply locales."""

    POLISH = "pl"
    ENGLISH = "en"

    @classmethod
    def primary(cls) -> "Language":
        return cls.POLISH

    def toggled(self) -> "Language":
        return Language.ENGLISH if self is Language.POLISH else Language.POLISH


class Task(BaseModel):
    """Progress of one user on one riddle."""

    id: str
    attempts: int = Field(default=0, ge=0)
    completed_at: Optional[datetime] = None
    guesses: List[str] = Field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def add_guesses(self, handles) -> None:
        """Merges handles into guesses, keeping first-seen order."""
        for handle in handles:
            if handle not in self.guesses:
                self.guesses.append(handle)


class User(BaseModel):
    """User document, one per Slack user."""

    id: str
    contact: str = ""
    language: Language = Language.POLISH
    flagged_suspicious: bool = False
    tasks: List[Task] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @validator("language", pre=True)
    def coerce_language(cls, v):
        """Unknown stored locales fall back to the primary one."""
        if isinstance(v, Language):
            return v
        try:
            return Language(v)
        except ValueError:
            return Language.primary()

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def get_or_add_task(self, task_id: str) -> Task:
        """Returns the task, appending a fresh one on first use."""
        task = self.get_task(task_id)
        if task is None:
            task = Task(id=task_id)
            self.tasks.append(task)
        return task

    def to_document(self) -> Dict[str, Any]:
        """Serializes to a MongoDB document keyed by the user id."""
        document = self.model_dump(mode="python")
        document["language"] = self.language.value
        document["_id"] = self.id
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        data = dict(document)
        key = data.pop("_id", None)
        data.setdefault("id", key)
        return cls(**data)
