"""
app/flow/states.py

Purpose: Defines task progression states and guess outcomes

- Task states (NOT_STARTED, IN_PROGRESS, COMPLETED)
- Outcome of evaluating a single guess
- Guess evaluation policies
- State transition validation
"""

from enum import Enum
from typing import Dict, List, Optional

from app.models.user import Task


class TaskState(str, Enum):
    """
    Progress of one user on one task.
    IN_PROGRESS and COMPLETED both loop on themselves.
    """

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    @classmethod
    def of(cls, task: Optional[Task]) -> "TaskState":
        """Derives the state from a stored task record."""
        if task is None:
            return cls.NOT_STARTED
        if task.is_completed:
            return cls.COMPLETED
        if task.attempts == 0 and not task.guesses:
            return cls.NOT_STARTED
        return cls.IN_PROGRESS


class GuessOutcome(str, Enum):
    """Result of evaluating one message against a task."""

    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    NO_GUESS = "NO_GUESS"
    TOO_FEW_HANDLES = "TOO_FEW_HANDLES"
    TOO_MANY_HANDLES = "TOO_MANY_HANDLES"
    PARTIAL_MATCH = "PARTIAL_MATCH"
    SOLVED = "SOLVED"

    @property
    def counts_as_attempt(self) -> bool:
        return self not in (GuessOutcome.ALREADY_COMPLETED, GuessOutcome.NO_GUESS)


class GuessPolicy(str, Enum):
    """
    STRICT: exact handle-count split into too few / too many / partial / solved.
    LENIENT: any mention counts as a guess; only a full, exact match solves.
    """

    STRICT = "strict"
    LENIENT = "lenient"


# Valid state transitions
STATE_TRANSITIONS: Dict[TaskState, List[TaskState]] = {
    TaskState.NOT_STARTED: [
        TaskState.NOT_STARTED,  # Message without a guess
        TaskState.IN_PROGRESS,
        TaskState.COMPLETED,  # Solved on the first try
    ],
    TaskState.IN_PROGRESS: [
        TaskState.IN_PROGRESS,
        TaskState.COMPLETED,
    ],
    TaskState.COMPLETED: [
        TaskState.COMPLETED,
    ],
}


def is_valid_transition(from_state: TaskState, to_state: TaskState) -> bool:
    """
    Checks if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    return to_state in STATE_TRANSITIONS.get(from_state, [])
