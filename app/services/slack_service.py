"""
app/services/slack_service.py

Purpose: Outbound Slack messaging

- Sends JSON payloads to Slack Web API actions (chat.postMessage, ...)
- Sends replies to one-time slash-command response URLs
- Looks up user profiles (users.info)
- Bearer token resolved from a named secret on every call
"""

import httpx
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from app.services.secret_service import get_secret

logger = get_logger(__name__)


class SlackService:
    """Service for talking to the Slack Web API"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.SLACK_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.SLACK_API_TIMEOUT

    async def _headers(self, credential_name: str) -> Dict[str, str]:
        token = await get_secret(credential_name)
        return {
            "Content-Type": "application/json; charset=utf-8",
            "Authorization": f"Bearer {token}",
        }

    async def send_api_request(
        self,
        data: Dict[str, Any],
        action: str,
        credential_name: str
    ) -> Dict[str, Any]:
        """
        Sends a JSON request to a Slack API action

        Args:
            data: JSON payload
            action: API method, e.g. "chat.postMessage"
            credential_name: Secret name of the bearer token

        Returns:
            Parsed Slack response

        Raises:
            ExternalServiceError: On transport errors, non-2xx status or {"ok": false}
        """
        url = f"{self.base_url}/{action}"
        headers = await self._headers(credential_name)

        logger.info(f"📤 Slack API request: {action}")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, json=data, headers=headers, timeout=self.timeout)
        except httpx.TimeoutException as e:
            logger.error(f"Slack API timeout: {action}")
            raise ExternalServiceError(f"Slack API timeout: {action}") from e
        except httpx.HTTPError as e:
            logger.error(f"Slack API request failed: {action}: {e}")
            raise ExternalServiceError(f"Slack API request failed: {action}") from e

        return self._parse_api_response(response, action)

    async def send_to_response_url(
        self,
        data: Dict[str, Any],
        response_url: str,
        credential_name: str
    ) -> str:
        """
        Posts a message to a slash-command response URL

        Returns:
            Raw response body (Slack answers "ok" in plain text)
        """
        headers = await self._headers(credential_name)

        logger.info("📤 Slack response_url request")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(response_url, json=data, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.error(f"Slack response_url request failed: {e}")
            raise ExternalServiceError("Slack response_url request failed") from e

        logger.info(f"Slack responded with a code {response.status_code}")

        if response.status_code >= 400:
            raise ExternalServiceError(
                f"Slack response_url error: {response.status_code}",
                details={"body": response.text[:200]}
            )

        return response.text

    async def fetch_user_profile(self, user_id: str, credential_name: str) -> Dict[str, Any]:
        """
        Fetches a user's profile via users.info

        Returns:
            The "user" object of the Slack response
        """
        url = f"{self.base_url}/users.info"
        headers = await self._headers(credential_name)

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    url,
                    params={"user": user_id},
                    headers=headers,
                    timeout=self.timeout
                )
        except httpx.HTTPError as e:
            logger.error(f"Slack users.info request failed: {e}")
            raise ExternalServiceError("Slack users.info request failed") from e

        body = self._parse_api_response(response, "users.info")
        return body.get("user", {})

    def _parse_api_response(self, response: httpx.Response, action: str) -> Dict[str, Any]:
        if response.status_code >= 400:
            logger.error(f"❌ Slack API error: {response.status_code} - {response.text[:200]}")
            raise ExternalServiceError(f"Slack API error: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Slack API response parsing failed for {action}")
            raise ExternalServiceError(f"Slack API returned invalid JSON: {action}") from e

        logger.info(f"Slack API responded with a code {response.status_code} (ok={body.get('ok')})")

        if not body.get("ok", False):
            raise ExternalServiceError(
                f"Slack API call {action} failed: {body.get('error', 'unknown_error')}",
                details=body
            )

        return body

    async def post_message(self, text: str, channel_id: str, credential_name: str) -> Dict[str, Any]:
        """Posts a message to a channel or DM conversation."""
        return await self.send_api_request(
            {"channel": channel_id, "text": text},
            "chat.postMessage",
            credential_name
        )

    async def post_in_thread(
        self,
        text: str,
        channel_id: str,
        thread_ts: str,
        credential_name: str
    ) -> Dict[str, Any]:
        """Posts a reply inside an existing thread."""
        return await self.send_api_request(
            {"channel": channel_id, "text": text, "thread_ts": thread_ts},
            "chat.postMessage",
            credential_name
        )

    async def post_response(
        self,
        text: str,
        response_url: str,
        credential_name: str,
        ephemeral: bool = True
    ) -> str:
        """Replies through a response URL, visible to the invoker only unless ephemeral=False."""
        return await self.send_to_response_url(
            {"text": text, "response_type": "ephemeral" if ephemeral else "in_channel"},
            response_url,
            credential_name
        )


# Singleton instance
slack_service = SlackService()
