"""
message_dispatcher.py
=====================

Outbound message pipeline.

Every send goes through the same stages: check that the bot may post in the
channel, normalise the payload, check embed permission for rich content,
validate sizes, submit, then optionally schedule a delete. Missing channel
permissions are an expected outcome and produce no message instead of an
error. Size violations are caught before any platform call.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import discord

from relaycord.configuration.template_settings import TemplateSettings
from relaycord.datatypes.dispatch_datatypes import (
    DispatchOptions,
    DispatchResult,
    ErrorCategory,
    MessageContent,
)
from relaycord.dispatch.auto_delete import AutoDeleteScheduler
from relaycord.dispatch.content_limits import check_content
from relaycord.permissions.permission_resolver import PermissionResolver
from relaycord.util.logger import get_logger

logger = get_logger("message_dispatcher")

Options = DispatchOptions | Mapping[str, Any] | None


def _describe(channel: Any) -> str:
    guild = getattr(channel, "guild", None)
    if guild is None:
        return f"DM - {getattr(channel, 'id', '?')}"
    return f"{guild.name} - #{getattr(channel, 'name', getattr(channel, 'id', '?'))}"


class MessageDispatcher:
    """
    Validate, authorize and submit outbound messages.

    Args:
        client: Platform client, used to resolve users for direct messages.
        resolver: Permission resolver consulted for channel capabilities.
        templates: Emotes and default texts for error/success messages.
        auto_delete: Scheduler for detached deletions. A private one is
            created when omitted.
        log: Logger sink. Defaults to the module logger.
    """

    def __init__(
        self,
        client: discord.Client,
        resolver: PermissionResolver,
        templates: TemplateSettings,
        auto_delete: AutoDeleteScheduler | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.resolver = resolver
        self.templates = templates
        self.logger = log or logger
        self.auto_delete = auto_delete or AutoDeleteScheduler(self.logger)

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def _can_send(self, channel: Any) -> bool:
        if getattr(channel, "guild", None) is None:
            return True
        if self.resolver.has_channel_capabilities(channel, ("send_messages",)):
            return True
        self.logger.debug("No send_messages permission [%s]", _describe(channel))
        return False

    def _can_embed(self, channel: Any) -> bool:
        if getattr(channel, "guild", None) is None:
            return True
        if self.resolver.has_channel_capabilities(channel, ("embed_links",)):
            return True
        self.logger.debug("No embed_links permission [%s]", _describe(channel))
        return False

    # ------------------------------------------------------------------
    # Send / edit
    # ------------------------------------------------------------------

    async def try_send(
        self,
        channel: discord.abc.Messageable,
        content: Any,
        options: Options = None,
    ) -> DispatchResult:
        """
        Send ``content`` to ``channel`` and describe the outcome.

        Validation failures are returned in ``DispatchResult.error`` without
        any platform call. A mapping with neither text nor an embed raises
        ``ValueError``. Platform errors propagate.
        """
        opts = DispatchOptions.coerce(options)

        if not self._can_send(channel):
            return DispatchResult()

        payload = MessageContent.coerce(content)
        if payload.is_rich and not self._can_embed(channel):
            return DispatchResult()

        error = check_content(payload)
        if error:
            return DispatchResult(error=error)

        message = await channel.send(allowed_mentions=opts.allowed_mentions, **payload.as_kwargs())

        if message is not None and opts.auto_delete:
            self.auto_delete.schedule(message, opts.delete_after_ms)

        return DispatchResult(message=message)

    async def send(
        self,
        channel: discord.abc.Messageable,
        content: Any,
        options: Options = None,
    ) -> discord.Message | None:
        """
        Send a message after permission and size checks.

        Returns:
            discord.Message | None: The sent message, or None when the bot
            may not post (or embed) in the channel.

        Raises:
            ContentTooLarge: If any part of the payload exceeds its limit.
        """
        result = await self.try_send(channel, content, options)
        return result.unwrap()

    async def try_edit(self, message: discord.Message | None, content: Any) -> DispatchResult:
        """Edit ``message`` with ``content``; no send permission is required."""
        if message is None or content is None or content == "":
            return DispatchResult()

        payload = MessageContent.coerce(content)
        if payload.is_rich and not self._can_embed(message.channel):
            return DispatchResult()

        error = check_content(payload)
        if error:
            return DispatchResult(error=error)

        edited = await message.edit(**payload.as_kwargs())
        return DispatchResult(message=edited)

    async def edit(self, message: discord.Message | None, content: Any) -> discord.Message | None:
        """
        Edit an existing message after size checks.

        Raises:
            ContentTooLarge: If any part of the payload exceeds its limit.
        """
        result = await self.try_edit(message, content)
        return result.unwrap()

    async def send_direct(
        self,
        user: discord.abc.User | int | str,
        content: Any,
        options: Options = None,
    ) -> discord.Message | None:
        """
        Send a direct message to ``user``.

        Resolving the DM channel can fail when the user has DMs disabled or
        has blocked the bot; that is logged and yields None.
        """
        try:
            if isinstance(user, (int, str)):
                user = await self.client.fetch_user(int(user))
            channel = await user.create_dm()
        except discord.HTTPException as exc:
            self.logger.debug("DM disabled/bot blocked [%s]: %s", getattr(user, "id", user), exc)
            return None

        return await self.send(channel, content, options)

    async def send_error(self, channel: discord.abc.Messageable, text: str, options: Options = None) -> discord.Message | None:
        return await self.send(channel, f"{self.templates.error_emote} {text}", options)

    async def send_success(self, channel: discord.abc.Messageable, text: str, options: Options = None) -> discord.Message | None:
        return await self.send(channel, f"{self.templates.success_emote} {text}", options)

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    async def report_error(
        self,
        origin: discord.Message,
        error: BaseException | None,
        category: ErrorCategory | str,
        user_text: str | None = None,
    ) -> None:
        """
        Tell the user something went wrong, then escalate.

        A technical ``error`` is annotated with its category and re-raised so
        upstream handlers can branch on ``error.error_category``. Without one,
        the failure is logged at CRITICAL and nothing is raised.

        Args:
            origin: The message whose handling failed; its channel is notified.
            error: The underlying exception, if any.
            category: One of :class:`ErrorCategory` (or its name).
            user_text: Text shown to the user instead of the generic message.
        """
        category = ErrorCategory.parse(category)
        channel = origin.channel

        await self.send_error(channel, user_text or self.templates.generic_error)

        if error is not None:
            error.error_category = category  # type: ignore[attr-defined]
            error.add_note(f"Type: {category.label}")
            raise error

        self.logger.critical("Unexpected %s [%s]", category.label.lower(), _describe(channel))
