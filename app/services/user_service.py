"""
app/services/user_service.py

Purpose: User data management

- Read one / all user documents
- Replace (upsert) and delete a user document by id
- Lazy user creation from the Slack profile
- Per-user serialization of read-modify-write cycles
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from app.core.config import settings
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_users_collection
from app.models.user import Language, User
from app.services.slack_service import slack_service

logger = get_logger(__name__)

# user_id -> (lock, number of holders and waiters)
_user_locks: Dict[str, list] = {}


@asynccontextmanager
async def user_lock(user_id: str) -> AsyncIterator[None]:
    """
    Serializes updates of one user inside this process.

    Concurrent messages from the same user would otherwise race on the
    whole-document replace (last write wins).
    """
    if not settings.SERIALIZE_USER_UPDATES:
        yield
        return

    entry = _user_locks.setdefault(user_id, [asyncio.Lock(), 0])
    entry[1] += 1
    try:
        async with entry[0]:
            yield
    finally:
        entry[1] -= 1
        if entry[1] == 0:
            _user_locks.pop(user_id, None)


async def get_user(user_id: str) -> Optional[User]:
    """
    Retrieves a user by Slack id.

    Args:
        user_id: Slack user id

    Returns:
        User or None if not found
    """
    if not user_id:
        logger.error("User not specified in get_user")
        return None

    users = get_users_collection()
    document = await users.find_one({"_id": user_id})

    if document is None:
        logger.debug("No data for the specified user", extra={"user_id": user_id})
        return None

    return User.from_document(document)


async def get_all_users() -> List[User]:
    """Retrieves every user document of the current edition."""
    users = get_users_collection()
    documents = await users.find({}).to_list(length=None)
    return [User.from_document(document) for document in documents]


async def save_user(user: User) -> bool:
    """
    Replaces the whole user document (creating it if needed).

    Args:
        user: User to persist

    Returns:
        True if the document was written
    """
    if not user.id:
        logger.warning("User data rejected for missing identifier")
        return False

    users = get_users_collection()
    await users.replace_one({"_id": user.id}, user.to_document(), upsert=True)
    logger.debug("User document saved", extra={"user_id": user.id})
    return True


async def delete_user(user_id: str) -> bool:
    """
    Permanently deletes a user document and all of its tasks.

    Returns:
        True if a document was deleted
    """
    with LogContext(user_id=user_id):
        users = get_users_collection()
        result = await users.delete_one({"_id": user_id})
        deleted = result.deleted_count > 0
        if deleted:
            logger.info("User data erased")
        else:
            logger.warning("Delete requested for unknown user")
        return deleted


async def get_or_create_user(user_id: str, credential_name: str) -> User:
    """
    Retrieves an existing user or creates one from the Slack profile.

    Args:
        user_id: Slack user id
        credential_name: Secret name of the persona OAuth token used for users.info

    Returns:
        User
    """
    user = await get_user(user_id)
    if user is not None:
        return user

    with LogContext(user_id=user_id):
        logger.info("Creating new user")

        profile = await slack_service.fetch_user_profile(user_id, credential_name)
        contact = (
            profile.get("profile", {}).get("email")
            or profile.get("name")
            or user_id
        )

        user = User(id=user_id, contact=contact, language=Language.primary())
        await save_user(user)

        logger.info("New user created successfully")
        return user
