"""Run summary delivery to a chat webhook.

Delivery is best-effort: one POST, no retry, and no error ever escapes
``WebhookNotifier.notify``.
"""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from repo_archiver.config import NotificationConfig
from repo_archiver.models import RunResult

logger = logging.getLogger(__name__)

EMBED_TITLE = "Repository Processing Summary"
EMBED_COLOR = 0x3498DB


class NotificationError(Exception):
    """Raised when the webhook rejects a notification."""


def format_summary(result: RunResult, dry_run: bool = False) -> str:
    """Render the run summary sent to the webhook.

    Args:
        result: Outcome of the run.
        dry_run: Whether the run skipped the remote mutations.

    Returns:
        Multi-line plain-text summary.
    """
    lines = [
        f"Total repositories processed: {result.total_processed}",
        f"Repositories archived: {result.archived_count}",
        f"Repositories unarchived: {result.unarchived_count}",
        f"Dry run: {'yes' if dry_run else 'no'}",
    ]
    return "\n".join(lines)


def build_payload(platform: str, message: str) -> dict[str, Any]:
    """Build the JSON body for a webhook platform.

    Discord receives a single embed; anything else gets a Slack-style
    ``text`` field.
    """
    if platform == "discord":
        embed = {
            "title": EMBED_TITLE,
            "description": message,
            "color": EMBED_COLOR,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        return {"embeds": [embed]}
    return {"text": message}


class WebhookNotifier:
    """Posts run summaries to the configured webhook."""

    def __init__(
        self,
        config: NotificationConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the notifier.

        Args:
            config: Notification configuration.
            client: Optional shared client; one is created per call otherwise.
        """
        self.config = config
        self._client = client

    async def notify(self, summary: str) -> None:
        """Deliver a summary. Never raises."""
        if not self.config.enabled:
            logger.info("No webhook URL configured, skipping notification.")
            return

        platform = self.config.resolved_platform()
        try:
            await self._deliver(build_payload(platform, summary))
        except (NotificationError, httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Failed to send %s notification: %s", platform, e)
            return

        logger.info("%s notification sent.", platform.capitalize())

    async def _deliver(self, payload: dict[str, Any]) -> None:
        url = self.config.webhook_url or ""
        if self._client is not None:
            response = await self._client.post(url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                response = await client.post(url, json=payload)

        if not response.is_success:
            msg = f"Webhook returned status {response.status_code}"
            raise NotificationError(msg)
