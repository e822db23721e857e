from pydantic import BaseModel
from typing import Dict, List


class UserProgress(BaseModel):
    """Per-user line of the progress report."""
    contact: str
    language: str
    points: int
    flagged_suspicious: bool
    solved: Dict[str, bool]


class ProgressReport(BaseModel):
    """
    Aggregate progress of the current edition.
    Command operators are excluded.
    """
    all_attempted: int
    solved: Dict[str, int]
    solved_all: int
    flagged_suspicious: int
    raw: List[UserProgress]
