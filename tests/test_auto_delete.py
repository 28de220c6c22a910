"""Tests for AutoDeleteScheduler."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock
import discord

from relaycord.dispatch.auto_delete import AutoDeleteScheduler


def make_message():
    message = MagicMock()
    message.id = 1
    message.delete = AsyncMock()
    return message


@pytest.mark.asyncio
async def test_immediate_delete():
    scheduler = AutoDeleteScheduler(MagicMock())
    message = make_message()

    task = scheduler.schedule(message)
    await task

    message.delete.assert_awaited_once()
    assert scheduler.pending == 0


@pytest.mark.asyncio
async def test_already_deleted_message_is_ignored():
    log = MagicMock()
    scheduler = AutoDeleteScheduler(log)
    message = make_message()
    response = MagicMock()
    response.status = 404
    response.reason = "Not Found"
    message.delete.side_effect = discord.NotFound(response, "message")

    await scheduler.schedule(message)

    log.debug.assert_called_once()


@pytest.mark.asyncio
async def test_unexpected_error_is_logged():
    log = MagicMock()
    scheduler = AutoDeleteScheduler(log)
    message = make_message()
    message.delete.side_effect = Exception("boom")

    await scheduler.schedule(message)

    log.error.assert_called_once()


@pytest.mark.asyncio
async def test_pending_tracks_in_flight_tasks():
    scheduler = AutoDeleteScheduler(MagicMock())

    scheduler.schedule(make_message(), 60_000)
    scheduler.schedule(make_message(), 60_000)

    assert scheduler.pending == 2
    await scheduler.shutdown()


@pytest.mark.asyncio
async def test_shutdown_cancels_pending_deletes():
    scheduler = AutoDeleteScheduler(MagicMock())
    message = make_message()

    task = scheduler.schedule(message, 60_000)
    await asyncio.sleep(0)
    await scheduler.shutdown()

    assert task.cancelled()
    message.delete.assert_not_called()
    assert scheduler.pending == 0

    # Idempotent
    await scheduler.shutdown()


@pytest.mark.asyncio
async def test_negative_delay_rejected():
    scheduler = AutoDeleteScheduler(MagicMock())

    with pytest.raises(ValueError):
        scheduler.schedule(make_message(), -1)
