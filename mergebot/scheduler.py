"""
Delayed rechecks.

Rechecks are plain asyncio tasks: the caller returns immediately and the
callback runs after the delay on the same event loop.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from mergebot.exceptions import ConfigurationError
from mergebot.logging import get_logger
from mergebot.policy import DEFAULT_RECHECK_DELAY


@dataclass
class RecheckConfig:
    """How often and how many times to re-evaluate a pull request with running checks."""

    delay: float = DEFAULT_RECHECK_DELAY  # seconds
    max_rechecks: int = 30

    @classmethod
    def from_env(cls) -> "RecheckConfig":
        """
        Read MERGEBOT_RECHECK_DELAY and MERGEBOT_MAX_RECHECKS.

        Raises:
            ConfigurationError: If a value is not a non-negative number
        """
        try:
            delay = float(os.environ.get("MERGEBOT_RECHECK_DELAY", DEFAULT_RECHECK_DELAY))
            max_rechecks = int(os.environ.get("MERGEBOT_MAX_RECHECKS", cls.max_rechecks))
        except ValueError as e:
            raise ConfigurationError(f"Invalid recheck setting: {e}") from e
        if delay < 0 or max_rechecks < 0:
            raise ConfigurationError("Recheck delay and count must not be negative")
        return cls(delay=delay, max_rechecks=max_rechecks)


class RecheckScheduler:
    """Runs callbacks after a delay as independent, uncancellable-by-key tasks."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("scheduler")
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(
        self,
        delay: float,
        callback: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> asyncio.Task[None]:
        """Run ``callback(*args)`` after ``delay`` seconds. Must be called from a running loop."""
        task = asyncio.get_running_loop().create_task(self._run_later(delay, callback, args))
        # The loop only keeps weak references to tasks.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_later(
        self,
        delay: float,
        callback: Callable[..., Awaitable[Any]],
        args: tuple[Any, ...],
    ) -> None:
        await asyncio.sleep(delay)
        try:
            await callback(*args)
        except Exception:
            # Nothing awaits this task.
            self.logger.exception("Scheduled recheck %s%r failed", _name(callback), args)

    async def drain(self) -> None:
        """Wait until every scheduled task, including ones scheduled meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel every pending task."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def _name(callback: Callable[..., Any]) -> str:
    return getattr(callback, "__qualname__", repr(callback))
