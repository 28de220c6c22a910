"""
Status/error notifications through configured Discord webhooks.

Firing a webhook never blocks or fails the caller: the request runs as a
detached task and any error is logged.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Dict

import discord

from relaycord.util.logger import get_logger

if TYPE_CHECKING:
    import aiohttp

logger = get_logger("webhook_notifier")


class WebhookNotifier:
    """
    Send embeds to the webhooks configured for each notification kind.

    Args:
        client: Bot client; its user name and avatar label the webhook posts.
        session: aiohttp session used for the webhook HTTP requests.
        webhooks: ``{kind: {"id": ..., "token": ...}}`` as returned by
            :attr:`AppConfig.webhooks`.
    """

    def __init__(
        self,
        client: discord.Client,
        session: "aiohttp.ClientSession",
        webhooks: Dict[str, Dict[str, str]],
    ) -> None:
        self.client = client
        self.session = session
        self.webhooks = webhooks
        self.tasks: set[asyncio.Task[None]] = set()

    def is_configured(self, kind: str) -> bool:
        entry = self.webhooks.get(kind) or {}
        return bool(entry.get("id")) and bool(entry.get("token"))

    def default_username(self, kind: str) -> str:
        bot_user = self.client.user
        return f"{kind[:1].upper()}{kind[1:]} - {bot_user.name if bot_user else ''}"

    def trigger(self, kind: str, embed: discord.Embed, username: str | None = None) -> asyncio.Task[None] | None:
        """
        Post ``embed`` to the ``kind`` webhook in the background.

        Returns:
            asyncio.Task | None: The detached task, or None when ``kind`` has no webhook.
        """
        if not self.is_configured(kind):
            logger.debug("No webhook configured for %s notifications", kind)
            return None

        loop = asyncio.get_running_loop()
        task = loop.create_task(self.execute(kind, embed, username or self.default_username(kind)))
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)
        return task

    async def execute(self, kind: str, embed: discord.Embed, username: str) -> None:
        entry = self.webhooks[kind]
        bot_user = self.client.user
        try:
            webhook = discord.Webhook.partial(int(entry["id"]), entry["token"], session=self.session)
            await webhook.send(
                username=username,
                avatar_url=bot_user.display_avatar.url if bot_user else None,
                embeds=[embed],
            )
        except Exception as exc:
            logger.error("Webhook issue (%s): %s", kind, exc)
