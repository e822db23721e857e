"""
app/services/secret_service.py

Purpose: Named secret lookup

- Resolves secrets (OAuth tokens, signing secrets, allow-lists) by name
- Secrets live in the environment under SECRET_ENV_PREFIX
  e.g. "kretes-signing-secret" -> SECRET_KRETES_SIGNING_SECRET
- Always reads the current value (no caching), so rotated secrets apply immediately
"""

import os
from typing import List

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger

logger = get_logger(__name__)


def secret_env_name(secret_name: str) -> str:
    """Maps a secret name to its environment variable name."""
    return settings.SECRET_ENV_PREFIX + secret_name.upper().replace("-", "_").replace(".", "_")


async def get_secret(secret_name: str) -> str:
    """
    Fetches the current value of a named secret.

    Args:
        secret_name: Secret identifier, e.g. "kretes-oauth-token"

    Returns:
        Secret value

    Raises:
        ExternalServiceError: If the secret is not configured
    """
    env_name = secret_env_name(secret_name)
    value = os.environ.get(env_name)

    if value is None:
        logger.error(f"Secret '{secret_name}' not found ({env_name})")
        raise ExternalServiceError(
            message=f"Secret '{secret_name}' is not available",
            details={"secret": secret_name}
        )

    return value.strip()


async def get_secret_list(secret_name: str) -> List[str]:
    """
    Fetches a comma separated secret as a list of trimmed, non-empty items.
    """
    raw = await get_secret(secret_name)
    return [item.strip() for item in raw.split(",") if item.strip()]
