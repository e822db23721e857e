"""
app/flow/task_machine.py

Purpose: Per-user task progression

- Extracts mentioned handles from a message
- Evaluates a guess against the required answers
- Applies the resulting transition to the user's task record
  (attempt counter, guess history, one-time completion, suspicion flag)

The caller persists the whole user document afterwards.
"""

import re
from datetime import datetime
from typing import Iterable, List, Optional

from app.core.logging import get_logger
from app.flow.states import GuessOutcome, GuessPolicy, TaskState, is_valid_transition
from app.models.user import User

logger = get_logger(__name__)

# "@alice", "@alice.smith" and Slack's "<@U024BE7LH>" / "<@U024BE7LH|alice>"
MENTION_PATTERN = re.compile(r"(?<![\w.])@([\w][\w.\-]*)")


def extract_handles(text: str) -> List[str]:
    """
    Returns the distinct mentioned handles in order of appearance, case-folded.

    Args:
        text: Raw message text

    Returns:
        List of unique handles without the leading "@"
    """
    handles: List[str] = []
    for match in MENTION_PATTERN.finditer(text or ""):
        handle = match.group(1).rstrip(".-").casefold()
        if handle and handle not in handles:
            handles.append(handle)
    return handles


def normalize_answers(answers: Iterable[str]) -> List[str]:
    """Strips '@', whitespace and case from configured answers, dropping duplicates."""
    normalized: List[str] = []
    for answer in answers:
        value = answer.strip().lstrip("@").casefold()
        if value and value not in normalized:
            normalized.append(value)
    return normalized


def evaluate_guess(
    handles: List[str],
    required_answers: List[str],
    completed: bool,
    policy: GuessPolicy = GuessPolicy.STRICT,
) -> GuessOutcome:
    """
    Decides the outcome of a guess without touching any state.

    Args:
        handles: Distinct handles mentioned in the message
        required_answers: Normalized answer handles
        completed: Whether the task is already completed
        policy: Evaluation policy

    Returns:
        GuessOutcome
    """
    if completed:
        return GuessOutcome.ALREADY_COMPLETED

    handle_count = len(handles)
    required_count = len(required_answers)
    matched = sum(1 for answer in required_answers if answer in handles)

    if handle_count == 0:
        return GuessOutcome.NO_GUESS

    if policy == GuessPolicy.LENIENT:
        if matched == required_count and handle_count == required_count:
            return GuessOutcome.SOLVED
        return GuessOutcome.PARTIAL_MATCH

    if handle_count < required_count:
        return GuessOutcome.TOO_FEW_HANDLES
    if handle_count > required_count:
        return GuessOutcome.TOO_MANY_HANDLES
    if matched == required_count:
        return GuessOutcome.SOLVED
    return GuessOutcome.PARTIAL_MATCH


def submit_guess(
    user: User,
    task_id: str,
    raw_text: str,
    required_answers: Iterable[str],
    policy: GuessPolicy = GuessPolicy.STRICT,
    now: Optional[datetime] = None,
) -> GuessOutcome:
    """
    Applies a guess to the user's task and returns the outcome.

    The task record is created on first use. Attempts are counted for every
    outcome except ALREADY_COMPLETED and NO_GUESS; completed_at is only ever
    set once.

    Args:
        user: User document (mutated in place)
        task_id: Tracked task identifier
        raw_text: Message text as sent by the user
        required_answers: Handles that solve the task
        policy: Evaluation policy
        now: Completion timestamp, defaults to utcnow

    Returns:
        GuessOutcome
    """
    answers = normalize_answers(required_answers)
    handles = extract_handles(raw_text)

    existing = user.get_task(task_id)
    before = TaskState.of(existing)
    outcome = evaluate_guess(
        handles,
        answers,
        completed=existing is not None and existing.is_completed,
        policy=policy,
    )

    if not outcome.counts_as_attempt:
        logger.info(
            f"Guess for {task_id} not counted: {outcome.value}",
            extra={"user_id": user.id, "task_id": task_id, "outcome": outcome.value}
        )
        return outcome

    task = user.get_or_add_task(task_id)
    task.attempts += 1
    task.add_guesses(handles)

    if len(handles) > len(answers):
        user.flagged_suspicious = True

    if outcome == GuessOutcome.SOLVED:
        task.completed_at = now or datetime.utcnow()

    after = TaskState.of(task)
    if not is_valid_transition(before, after):
        logger.error(f"Invalid task transition {before.value} -> {after.value}", extra={"user_id": user.id})

    logger.info(
        f"Guess for {task_id}: {outcome.value} (attempt {task.attempts}, "
        f"{len(handles)} handles, {before.value} -> {after.value})",
        extra={"user_id": user.id, "task_id": task_id, "outcome": outcome.value}
    )
    return outcome
