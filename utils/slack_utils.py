"""
utils/slack_utils.py

Purpose: Slack text helpers

- Slash-command parsing: thread reference from a leading permalink
- Permalink timestamp conversion (p1706123456789012 -> 1706123456.789012)
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse

from app.core.logging import get_logger

logger = get_logger(__name__)

# Path segment of a message permalink, e.g. /archives/C0ABC/p1706123456789012
PERMALINK_SEGMENT_PATTERN = re.compile(r"^p(\d{16})$")


def permalink_to_ts(digits: str) -> str:
    """Converts 16 permalink digits to Slack's "seconds.micros" timestamp."""
    return f"{digits[:10]}.{digits[10:]}"


def _host_matches(host: str, domain: str) -> bool:
    host = host.lower().rstrip(".")
    domain = domain.lower()
    return host == domain or host.endswith("." + domain)


def extract_thread_reference(text: str, domain: str = "slack.com") -> Tuple[str, Optional[str]]:
    """
    Extracts a thread timestamp from a leading message permalink.

    "https://x.slack.com/archives/C1/p1234567890123456 hello"
        -> ("hello", "1234567890.123456")

    Args:
        text: Slash-command text
        domain: Platform domain the permalink host must end with

    Returns:
        (remaining text, thread timestamp or None). The text is returned
        unchanged when the first token is not a matching permalink.
    """
    if not text:
        return text, None

    parts = text.strip().split(None, 1)
    first_token = parts[0]
    rest = parts[1] if len(parts) > 1 else ""

    # Slack wraps links in angle brackets: <https://...|label>
    candidate = first_token
    if candidate.startswith("<") and candidate.endswith(">"):
        candidate = candidate[1:-1].split("|", 1)[0]

    try:
        parsed = urlparse(candidate)
        host = parsed.hostname
    except ValueError as e:
        logger.warning(f"Malformed URL in command text ignored: {e}")
        return text, None

    if not parsed.scheme or not host:
        return text, None

    if not _host_matches(host, domain):
        logger.debug(f"Leading URL host {host} is not a {domain} permalink")
        return text, None

    for segment in parsed.path.split("/"):
        match = PERMALINK_SEGMENT_PATTERN.match(segment)
        if match:
            return rest, permalink_to_ts(match.group(1))

    logger.debug("Leading URL has no message timestamp segment")
    return text, None
