"""
Pytest configuration and fixtures for relaycord tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

# Keep session log files out of the working tree; must run before relaycord imports
os.environ.setdefault("RELAYCORD_LOG_DIR", tempfile.mkdtemp(prefix="relaycord-logs-"))

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from relaycord.configuration.template_settings import TemplateSettings  # noqa: E402
from relaycord.datatypes.staff_datatypes import StaffRoster  # noqa: E402
from relaycord.dispatch.message_dispatcher import MessageDispatcher  # noqa: E402
from relaycord.permissions.permission_resolver import PermissionResolver  # noqa: E402

ALL_SEND_PERMS = {"send_messages": True, "embed_links": True}


def build_member(member_id=1, roles=(), **perms):
    """A guild member mock with real guild permissions and role mocks."""
    member = MagicMock()
    member.id = member_id
    member.guild_permissions = discord.Permissions(**perms)
    member.roles = [MagicMock(id=role_id) for role_id in roles]
    return member


def build_channel(guild=True, **perms):
    """A text channel mock whose ``permissions_for`` returns real permissions."""
    channel = MagicMock()
    channel.id = 555
    channel.name = "general"
    if guild:
        channel.guild = MagicMock()
        channel.guild.name = "Test Guild"
    else:
        channel.guild = None
    channel.permissions_for.return_value = discord.Permissions(**perms)
    sent = MagicMock()
    sent.id = 999
    sent.delete = AsyncMock()
    channel.send = AsyncMock(return_value=sent)
    return channel


@pytest.fixture()
def roster():
    return StaffRoster.from_ids(owners=["10"], admins=[20], staff=["30", "31"])


@pytest.fixture()
def client():
    bot = MagicMock()
    bot.user = MagicMock()
    bot.user.id = 4242
    bot.user.name = "relay"
    return bot


@pytest.fixture()
def resolver(client, roster):
    return PermissionResolver(client, roster_provider=lambda: roster)


@pytest.fixture()
def log():
    return MagicMock()


@pytest.fixture()
def dispatcher(client, resolver, log):
    return MessageDispatcher(client, resolver, TemplateSettings(), log=log)
