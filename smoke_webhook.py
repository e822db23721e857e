"""
Manual smoke test: sends a signed direct-message event to a running bot

    SECRET_KRETES_SIGNING_SECRET=... python smoke_webhook.py "pomoc"
"""
import asyncio
import json
import os
import sys
import time

import httpx

from app.core.security import compute_signature


async def send_event(text: str, persona: str = "kretes", base_url: str = "http://localhost:8080"):
    """Simulate what Slack sends for a direct message"""

    url = f"{base_url}/{persona}/events"
    secret = os.environ.get(f"SECRET_{persona.upper()}_SIGNING_SECRET", "")

    body = json.dumps({
        "type": "event_callback",
        "event": {
            "type": "message",
            "text": text,
            "user": os.environ.get("SMOKE_USER_ID", "U0SMOKETEST"),
            "channel": os.environ.get("SMOKE_CHANNEL_ID", "D0SMOKETEST"),
        }
    })
    timestamp = str(int(time.time()))

    print(f"🧪 Testing webhook: {url}")
    print(f"📤 Sending: {body}\n")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                url,
                content=body,
                headers={
                    "Content-Type": "application/json",
                    "X-Slack-Request-Timestamp": timestamp,
                    "X-Slack-Signature": compute_signature(timestamp, body, secret),
                },
                timeout=10.0
            )

            print(f"✅ Status: {response.status_code}")
            print(f"📥 Response: {response.text[:200]}")

            if response.status_code == 200:
                print("\n✅ Webhook is working! The reply goes to the DM channel.")
            else:
                print(f"\n❌ Webhook returned {response.status_code}")

    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")

if __name__ == "__main__":
    asyncio.run(send_event(sys.argv[1] if len(sys.argv) > 1 else "pomoc"))
