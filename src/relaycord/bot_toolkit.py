"""
Wiring for the relaycord helpers.

``BotToolkit`` builds the permission resolver, dispatcher, auto-delete
scheduler and (optionally) webhook notifier from one ``AppConfig`` so a bot
only has to hold a single object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import discord

from relaycord.configuration.app_configuration import AppConfig, get_app_config
from relaycord.dispatch.auto_delete import AutoDeleteScheduler
from relaycord.dispatch.message_dispatcher import MessageDispatcher
from relaycord.notifications.webhook_notifier import WebhookNotifier
from relaycord.permissions.permission_resolver import PermissionResolver
from relaycord.util.logger import get_logger

if TYPE_CHECKING:
    import aiohttp

logger = get_logger("bot_toolkit")


@dataclass(slots=True)
class BotToolkit:
    client: discord.Client
    config: AppConfig
    resolver: PermissionResolver
    dispatcher: MessageDispatcher
    auto_delete: AutoDeleteScheduler
    webhooks: WebhookNotifier | None = None

    @classmethod
    def from_config(
        cls,
        client: discord.Client,
        config: AppConfig | None = None,
        session: "aiohttp.ClientSession | None" = None,
    ) -> "BotToolkit":
        """
        Build every helper from ``config`` (the shared app config by default).

        The staff roster is read from the config on each check, so
        ``config.reload()`` takes effect without rebuilding the toolkit.
        Webhooks are only wired when an aiohttp ``session`` is supplied.
        """
        config = config or get_app_config()
        resolver = PermissionResolver(
            client,
            roster_provider=lambda: config.staff_roster,
            admin_capabilities=config.admin_capabilities,
        )
        auto_delete = AutoDeleteScheduler()
        dispatcher = MessageDispatcher(client, resolver, config.templates, auto_delete=auto_delete)
        webhooks = WebhookNotifier(client, session, config.webhooks) if session is not None else None
        logger.debug("Toolkit ready (webhooks: %s)", sorted(webhooks.webhooks) if webhooks else "disabled")
        return cls(
            client=client,
            config=config,
            resolver=resolver,
            dispatcher=dispatcher,
            auto_delete=auto_delete,
            webhooks=webhooks,
        )

    async def close(self) -> None:
        """Cancel pending auto-deletes. Call from the bot's ``close``."""
        await self.auto_delete.shutdown()
