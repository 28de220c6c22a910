"""Tests for PermissionResolver."""

import pytest
from unittest.mock import MagicMock
import discord

from conftest import build_channel, build_member
from relaycord.datatypes.discord_datatypes import UserID
from relaycord.datatypes.guild_moderation import GuildModerationConfig
from relaycord.datatypes.staff_datatypes import StaffRank, StaffRoster, StaffTier
from relaycord.permissions.permission_resolver import PermissionResolver, validate_capabilities


class TestChannelCapabilities:
    """Tests for has_channel_capabilities."""

    def test_all_capabilities_held(self, resolver):
        channel = build_channel(send_messages=True, embed_links=True)

        assert resolver.has_channel_capabilities(channel, ["send_messages", "embed_links"]) is True

    def test_one_capability_missing(self, resolver):
        channel = build_channel(send_messages=True)

        assert resolver.has_channel_capabilities(channel, ["send_messages", "embed_links"]) is False

    def test_empty_requirement_is_true(self, resolver):
        channel = build_channel()

        assert resolver.has_channel_capabilities(channel, []) is True
        channel.permissions_for.assert_not_called()

    def test_defaults_to_bot_member(self, resolver):
        channel = build_channel(send_messages=True)

        resolver.has_channel_capabilities(channel, ["send_messages"])

        channel.permissions_for.assert_called_once_with(channel.guild.me)

    def test_explicit_actor(self, resolver):
        channel = build_channel(send_messages=True)
        actor = MagicMock()

        resolver.has_channel_capabilities(channel, ["send_messages"], actor)

        channel.permissions_for.assert_called_once_with(actor)

    def test_private_channel_uses_client_user(self, resolver, client):
        channel = build_channel(guild=False, send_messages=True)

        resolver.has_channel_capabilities(channel, ["send_messages"])

        channel.permissions_for.assert_called_once_with(client.user)

    def test_uncached_bot_member_denies(self, resolver):
        channel = build_channel(send_messages=True)
        channel.guild.me = None

        assert resolver.has_channel_capabilities(channel, ["send_messages"]) is False
        channel.permissions_for.assert_not_called()

    def test_unknown_capability_rejected(self, resolver):
        with pytest.raises(ValueError, match="not_a_flag"):
            resolver.has_channel_capabilities(build_channel(), ["not_a_flag"])


class TestMemberCapabilities:
    """Tests for missing_capabilities / has_all_capabilities."""

    def test_collects_every_missing_capability(self, resolver):
        member = build_member(send_messages=True)

        missing = resolver.missing_capabilities(member, ["send_messages", "embed_links", "manage_messages"])

        assert missing == {"embed_links", "manage_messages"}

    def test_result_independent_of_order(self, resolver):
        member = build_member(send_messages=True)

        forward = resolver.missing_capabilities(member, ["send_messages", "embed_links", "manage_messages"])
        backward = resolver.missing_capabilities(member, ["manage_messages", "embed_links", "send_messages"])

        assert forward == backward

    def test_nothing_missing(self, resolver):
        member = build_member(send_messages=True, embed_links=True)

        assert resolver.missing_capabilities(member, ["send_messages", "embed_links"]) == set()
        assert resolver.has_all_capabilities(member, ["send_messages", "embed_links"]) is True

    def test_has_all_false_when_missing(self, resolver):
        member = build_member(send_messages=True)

        assert resolver.has_all_capabilities(member, ["send_messages", "ban_members"]) is False


class TestBotStaff:
    """Tests for the owner > admin > staff hierarchy."""

    def test_owner(self, resolver):
        assert resolver.is_bot_owner("10") is True
        assert resolver.is_bot_owner(10) is True
        assert resolver.is_bot_owner("20") is False

    def test_owner_is_admin(self, resolver):
        assert resolver.is_bot_admin("10") is True
        assert resolver.is_bot_admin("20") is True
        assert resolver.is_bot_admin("30") is False

    def test_staff_checks_every_tier(self, resolver):
        assert resolver.is_bot_staff("10") is True
        assert resolver.is_bot_staff("20") is True
        assert resolver.is_bot_staff("31") is True
        assert resolver.is_bot_staff("99") is False

    @pytest.mark.parametrize("actor_id", ["10", "20", "30", "31", "99", 10, UserID(20)])
    def test_tiers_are_monotonic(self, resolver, actor_id):
        if resolver.is_bot_owner(actor_id):
            assert resolver.is_bot_admin(actor_id)
        if resolver.is_bot_admin(actor_id):
            assert resolver.is_bot_staff(actor_id)

    def test_invalid_id_is_not_staff(self, resolver):
        assert resolver.is_bot_staff("not-a-snowflake") is False

    def test_staff_rank(self, resolver):
        assert resolver.staff_rank("10") is StaffRank.OWNER
        assert resolver.staff_rank("20") is StaffRank.ADMIN
        assert resolver.staff_rank("30") is StaffRank.STAFF
        assert resolver.staff_rank("99") is None

    def test_roster_read_on_every_call(self, client):
        rosters = [StaffRoster(), StaffRoster.from_ids(owners=["10"])]
        resolver = PermissionResolver(client, roster_provider=lambda: rosters[-1])

        assert resolver.is_bot_owner("10") is True
        rosters.append(StaffRoster())
        assert resolver.is_bot_owner("10") is False

    def test_roster_built_from_raw_tiers(self, client):
        roster = StaffRoster(
            tiers=(
                StaffTier(StaffRank.OWNER, frozenset({10})),
                StaffTier(StaffRank.ADMIN, frozenset({"20"})),
                StaffTier(StaffRank.STAFF),
            )
        )
        resolver = PermissionResolver(client, roster_provider=lambda: roster)

        assert resolver.is_bot_owner(10) is True
        assert resolver.is_bot_owner("10") is True
        assert resolver.is_bot_admin(20) is True
        assert resolver.staff_rank(UserID(10)) is StaffRank.OWNER


class TestGuildRoles:
    """Tests for is_guild_admin / is_guild_moderator."""

    @pytest.mark.parametrize(
        "flag",
        ["administrator", "manage_guild", "manage_roles", "manage_channels", "kick_members", "ban_members"],
    )
    def test_admin_capabilities(self, resolver, flag):
        assert resolver.is_guild_admin(build_member(**{flag: True})) is True

    def test_regular_member_not_admin(self, resolver):
        assert resolver.is_guild_admin(build_member(send_messages=True, manage_messages=True)) is False

    def test_custom_admin_capabilities(self, client, roster):
        resolver = PermissionResolver(client, lambda: roster, admin_capabilities=["manage_messages"])

        assert resolver.is_guild_admin(build_member(manage_messages=True)) is True
        assert resolver.is_guild_admin(build_member(ban_members=True)) is False

    def test_invalid_admin_capabilities_rejected(self, client, roster):
        with pytest.raises(ValueError):
            PermissionResolver(client, lambda: roster, admin_capabilities=["manage_everything"])

    def test_moderator_by_user(self, resolver):
        config = GuildModerationConfig.from_ids(moderator_users=["7"])

        assert resolver.is_guild_moderator(build_member(member_id=7), config) is True

    def test_moderator_by_role(self, resolver):
        config = GuildModerationConfig.from_ids(moderator_roles=[300])

        assert resolver.is_guild_moderator(build_member(roles=[100, 300]), config) is True
        assert resolver.is_guild_moderator(build_member(roles=[100]), config) is False

    def test_moderator_lists_of_raw_ints(self, resolver):
        config = GuildModerationConfig(moderator_users=frozenset({7}), moderator_roles=frozenset({300}))

        assert resolver.is_guild_moderator(build_member(member_id=7), config) is True
        assert resolver.is_guild_moderator(build_member(member_id=8, roles=[300]), config) is True
        assert resolver.is_guild_moderator(build_member(member_id=8, roles=[301]), config) is False

    def test_admin_is_always_moderator(self, resolver):
        member = build_member(kick_members=True)

        for config in (GuildModerationConfig(), GuildModerationConfig.from_ids(["1234"], ["5678"])):
            assert resolver.is_guild_moderator(member, config) is True

    def test_not_moderator(self, resolver):
        config = GuildModerationConfig.from_ids(moderator_users=["8"], moderator_roles=["9"])

        assert resolver.is_guild_moderator(build_member(member_id=7, roles=[1]), config) is False


def test_validate_capabilities_passes_known_flags():
    assert validate_capabilities(["send_messages", "embed_links"]) == ("send_messages", "embed_links")


def test_validate_capabilities_lists_unknown_flags():
    with pytest.raises(ValueError, match="bogus"):
        validate_capabilities(["send_messages", "bogus"])


def test_permissions_object_is_real():
    # Guards the test helpers: permission bits come from discord.Permissions.
    assert build_member(embed_links=True).guild_permissions == discord.Permissions(embed_links=True)
