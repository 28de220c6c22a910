"""
permission_resolver.py
======================

Authorization checks for bot actions.

Answers "can this actor do X" from channel/member permission bits, the bot
staff roster and a guild's moderator lists. Everything here is synchronous
and only reads what it is handed; denials caused by an uncached bot member
are logged at DEBUG.
"""

from __future__ import annotations

from typing import Callable, Iterable, Union

import discord

from relaycord.configuration.app_configuration import DEFAULT_ADMIN_CAPABILITIES
from relaycord.datatypes.discord_datatypes import RoleID, UserID
from relaycord.datatypes.guild_moderation import GuildModerationConfig
from relaycord.datatypes.staff_datatypes import StaffRank, StaffRoster
from relaycord.util.logger import get_logger

logger = get_logger("permission_resolver")

RosterProvider = Callable[[], StaffRoster]
ActorID = Union[str, int, UserID]


def validate_capabilities(capabilities: Iterable[str]) -> tuple[str, ...]:
    """
    Check that every name is a ``discord.Permissions`` flag.

    Raises:
        ValueError: If a name is not a known permission flag.
    """
    names = tuple(capabilities)
    unknown = [name for name in names if name not in discord.Permissions.VALID_FLAGS]
    if unknown:
        raise ValueError(f"Unknown permission flag(s): {', '.join(sorted(unknown))}")
    return names


class PermissionResolver:
    """
    Resolve bot-level and guild-level authorization.

    Args:
        client: The platform client; its ``user`` is the default actor for
            channels without a guild. In a guild the bot's own member is used.
        roster_provider: Returns the current staff roster. Called on every
            bot-level check, never cached.
        admin_capabilities: Permission flags that make a member a guild admin.
    """

    def __init__(
        self,
        client: discord.Client,
        roster_provider: RosterProvider,
        admin_capabilities: Iterable[str] = DEFAULT_ADMIN_CAPABILITIES,
    ) -> None:
        self.client = client
        self.roster_provider = roster_provider
        self.admin_capabilities = validate_capabilities(admin_capabilities)

    # ------------------------------------------------------------------
    # Capability checks
    # ------------------------------------------------------------------

    def default_actor(self, channel: discord.abc.GuildChannel | discord.abc.PrivateChannel):
        """
        Return the bot's own identity for ``channel``.

        Guild channels need the bot's guild member so role permissions and
        overwrites apply; this is None when the member is not cached.
        """
        guild = getattr(channel, "guild", None)
        if guild is None:
            return self.client.user
        return getattr(guild, "me", None)

    def has_channel_capabilities(
        self,
        channel: discord.abc.GuildChannel | discord.abc.PrivateChannel,
        required: Iterable[str],
        actor: discord.abc.Snowflake | None = None,
    ) -> bool:
        """
        Return True if ``actor`` holds every capability in ``required`` within ``channel``.

        Args:
            channel: Channel whose permission overwrites apply.
            required: Permission flag names, e.g. ``("send_messages", "embed_links")``.
            actor: Member or user to check. Defaults to the bot itself.
        """
        names = validate_capabilities(required)
        if not names:
            return True

        if actor is None:
            actor = self.default_actor(channel)
            if actor is None:
                logger.debug("Bot member not cached for %s; denying %s", getattr(channel, "id", channel), ", ".join(names))
                return False

        permissions = channel.permissions_for(actor)
        return all(getattr(permissions, name) for name in names)

    def missing_capabilities(self, member: discord.Member, required: Iterable[str]) -> set[str]:
        """Return every capability in ``required`` that ``member`` lacks guild-wide."""
        names = validate_capabilities(required)
        permissions = member.guild_permissions
        return {name for name in names if not getattr(permissions, name)}

    def has_all_capabilities(self, member: discord.Member, required: Iterable[str]) -> bool:
        return not self.missing_capabilities(member, required)

    # ------------------------------------------------------------------
    # Bot staff
    # ------------------------------------------------------------------

    def is_bot_owner(self, actor_id: ActorID) -> bool:
        return actor_id in self.roster_provider().tier(StaffRank.OWNER)

    def is_bot_admin(self, actor_id: ActorID) -> bool:
        """Owners are always admins."""
        roster = self.roster_provider()
        return actor_id in roster.tier(StaffRank.OWNER) or actor_id in roster.tier(StaffRank.ADMIN)

    def is_bot_staff(self, actor_id: ActorID) -> bool:
        """True if the actor appears in any roster tier."""
        return any(actor_id in tier for tier in self.roster_provider())

    def staff_rank(self, actor_id: ActorID) -> StaffRank | None:
        """Return the highest tier the actor belongs to, if any."""
        for tier in self.roster_provider():
            if actor_id in tier:
                return tier.rank
        return None

    # ------------------------------------------------------------------
    # Guild roles
    # ------------------------------------------------------------------

    def is_guild_admin(self, member: discord.Member) -> bool:
        permissions = member.guild_permissions
        return any(getattr(permissions, name) for name in self.admin_capabilities)

    def is_guild_moderator(self, member: discord.Member, config: GuildModerationConfig) -> bool:
        """
        Return True if ``member`` moderates the guild.

        A member is a moderator when listed directly, when holding a listed
        role, or when they are a guild admin.
        """
        if UserID.from_user(member) in config.moderator_users:
            return True

        if any(RoleID.from_role(role) in config.moderator_roles for role in getattr(member, "roles", ())):
            return True

        return self.is_guild_admin(member)
