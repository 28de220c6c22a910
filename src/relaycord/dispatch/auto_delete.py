"""
Detached deletion of sent messages.

Each scheduled delete runs as its own asyncio task so the caller that sent the
message never waits on it. Failures are logged here and never reach the
sender.
"""

import asyncio
import logging

import discord

from relaycord.util.logger import get_logger

logger = get_logger("auto_delete")


class AutoDeleteScheduler:
    """
    Fire-and-forget scheduler for message deletions.

    Attributes:
        tasks (set[asyncio.Task]): In-flight deletion tasks. Holding the
            references keeps the event loop from garbage-collecting them.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.tasks: set[asyncio.Task[None]] = set()
        self.logger = log or logger

    @property
    def pending(self) -> int:
        return len(self.tasks)

    def schedule(self, message: discord.Message, delay_ms: int = 0) -> asyncio.Task[None]:
        """
        Delete ``message`` after ``delay_ms`` milliseconds without blocking the caller.

        Must be called from a running event loop.

        Returns:
            asyncio.Task: The detached deletion task.
        """
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

        loop = asyncio.get_running_loop()
        task = loop.create_task(self.delete_later(message, delay_ms), name=f"relaycord-autodelete-{message.id}")
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)
        return task

    async def delete_later(self, message: discord.Message, delay_ms: int) -> None:
        if delay_ms:
            await asyncio.sleep(delay_ms / 1000)

        try:
            await message.delete()
        except discord.NotFound:
            self.logger.debug("Auto-delete skipped: message %s already gone", message.id)
        except discord.Forbidden:
            self.logger.warning("No permission to auto-delete message %s", message.id)
        except Exception as exc:
            self.logger.error("Error auto-deleting message %s: %s", message.id, exc)

    async def shutdown(self) -> None:
        """
        Cancel every pending deletion and wait for the tasks to finish.

        Safe to call multiple times.
        """
        tasks = list(self.tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.tasks.clear()
