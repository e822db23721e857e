"""
app/api/report.py

Purpose: Progress report of the current edition

- Summarizes stored user documents (solved counts per task)
- Excludes command operators (the authorized users allow-list)
- Open in development, bearer token protected elsewhere
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from app.core.config import settings
from app.core.logging import get_logger
from app.personas.registry import tracked_task_ids
from app.schemas.report import ProgressReport, UserProgress
from app.services.secret_service import get_secret, get_secret_list
from app.services.user_service import get_all_users

logger = get_logger(__name__)
router = APIRouter()


async def require_report_token(authorization: Optional[str] = Header(None)) -> None:
    """
    Checks the bearer token against the report token secret.
    Skipped in development.
    """
    if settings.is_development:
        return

    if authorization is None or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")

    token = authorization[len("Bearer "):].strip()
    expected = await get_secret(settings.REPORT_TOKEN_SECRET)
    if token != expected:
        logger.warning("Report requested with an invalid token")
        raise HTTPException(status_code=401, detail="Invalid bearer token")


@router.get("/report", response_model=ProgressReport, dependencies=[Depends(require_report_token)])
async def progress_report():
    """
    Aggregate progress over all users.
    """
    operators = set(await get_secret_list(settings.AUTHORIZED_USERS_SECRET))
    task_ids = tracked_task_ids()

    rows = []
    for user in await get_all_users():
        if user.id in operators or not user.tasks:
            continue

        solved = {task_id: False for task_id in task_ids}
        for task in user.tasks:
            if task.is_completed:
                solved[task.id] = True

        rows.append(UserProgress(
            contact=user.contact,
            language=user.language.value,
            points=sum(1 for done in solved.values() if done),
            flagged_suspicious=user.flagged_suspicious,
            solved=solved,
        ))

    return ProgressReport(
        all_attempted=len(rows),
        solved={task_id: sum(1 for row in rows if row.solved.get(task_id)) for task_id in task_ids},
        solved_all=sum(1 for row in rows if all(row.solved.get(task_id) for task_id in task_ids)),
        flagged_suspicious=sum(1 for row in rows if row.flagged_suspicious),
        raw=rows,
    )
