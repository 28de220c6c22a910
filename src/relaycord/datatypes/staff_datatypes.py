"""
Bot staff roster: owners, admins and staff.

The roster is an ordered, fixed list of named tiers. Authorization checks walk
the tiers themselves rather than looking anything up by tier name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping

from relaycord.datatypes.discord_datatypes import UserID


class StaffRank(Enum):
    """Staff tiers, highest authority first."""

    OWNER = "owners"
    ADMIN = "admins"
    STAFF = "staff"

    def __str__(self) -> str:
        return self.value


def _to_user_ids(values: Iterable[Any] | None) -> frozenset[UserID]:
    return frozenset(UserID(value) for value in (values or ()))


@dataclass(frozen=True, slots=True)
class StaffTier:
    """One roster tier and the users in it."""

    rank: StaffRank
    members: frozenset[UserID] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", _to_user_ids(self.members))

    def __contains__(self, actor_id: object) -> bool:
        try:
            return UserID(actor_id) in self.members  # type: ignore[arg-type]
        except ValueError:
            return False


@dataclass(frozen=True, slots=True)
class StaffRoster:
    """
    Process-wide staff roster.

    Attributes:
        tiers: Exactly one tier per :class:`StaffRank`, in rank order.
    """

    tiers: tuple[StaffTier, ...] = (
        StaffTier(StaffRank.OWNER),
        StaffTier(StaffRank.ADMIN),
        StaffTier(StaffRank.STAFF),
    )

    @classmethod
    def from_ids(
        cls,
        owners: Iterable[Any] | None = None,
        admins: Iterable[Any] | None = None,
        staff: Iterable[Any] | None = None,
    ) -> "StaffRoster":
        return cls(
            tiers=(
                StaffTier(StaffRank.OWNER, _to_user_ids(owners)),
                StaffTier(StaffRank.ADMIN, _to_user_ids(admins)),
                StaffTier(StaffRank.STAFF, _to_user_ids(staff)),
            )
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "StaffRoster":
        """Build a roster from a ``{"owners": [...], "admins": [...], "staff": [...]}`` mapping."""
        data = data or {}
        return cls.from_ids(
            owners=data.get(StaffRank.OWNER.value),
            admins=data.get(StaffRank.ADMIN.value),
            staff=data.get(StaffRank.STAFF.value),
        )

    def __iter__(self) -> Iterator[StaffTier]:
        return iter(self.tiers)

    def tier(self, rank: StaffRank) -> StaffTier:
        for tier in self.tiers:
            if tier.rank is rank:
                return tier
        return StaffTier(rank)

    @property
    def owners(self) -> frozenset[UserID]:
        return self.tier(StaffRank.OWNER).members

    @property
    def admins(self) -> frozenset[UserID]:
        return self.tier(StaffRank.ADMIN).members

    @property
    def staff(self) -> frozenset[UserID]:
        return self.tier(StaffRank.STAFF).members
