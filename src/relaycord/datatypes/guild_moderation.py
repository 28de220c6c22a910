"""Per-guild moderator lists supplied by the caller on each check."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from relaycord.datatypes.discord_datatypes import RoleID, UserID


@dataclass(frozen=True, slots=True)
class GuildModerationConfig:
    """
    Moderator users and roles configured for one guild.

    Attributes:
        moderator_users: Users treated as moderators regardless of roles.
        moderator_roles: Roles whose holders are moderators.
    """

    moderator_users: frozenset[UserID] = field(default_factory=frozenset)
    moderator_roles: frozenset[RoleID] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Raw ints and strings hash differently from the wrappers; store wrappers only.
        object.__setattr__(self, "moderator_users", frozenset(UserID(value) for value in self.moderator_users))
        object.__setattr__(self, "moderator_roles", frozenset(RoleID(value) for value in self.moderator_roles))

    @classmethod
    def from_ids(
        cls,
        moderator_users: Iterable[Any] | None = None,
        moderator_roles: Iterable[Any] | None = None,
    ) -> "GuildModerationConfig":
        return cls(
            moderator_users=frozenset(moderator_users or ()),
            moderator_roles=frozenset(moderator_roles or ()),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "GuildModerationConfig":
        """Build from a guild settings row such as ``{"moderator_users": [...], "moderator_roles": [...]}``."""
        data = data or {}
        return cls.from_ids(data.get("moderator_users"), data.get("moderator_roles"))
