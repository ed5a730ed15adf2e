from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Callable, Optional, Set

from ...logging_config import logger
from .aggregator import ChronicleAggregator

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..context import JournalContext
    from ..journal import EntryLog


class ChronicleRefreshScheduler:
    """Coalesces refresh requests so one journal never has two rollups in flight."""

    def __init__(
        self,
        aggregator: ChronicleAggregator,
        context_factory: Callable[[], "JournalContext"],
        entry_log: "EntryLog",
        part_size: Optional[int] = None,
    ) -> None:
        self._aggregator = aggregator
        self._context_factory = context_factory
        self._entry_log = entry_log
        self._part_size = part_size
        self._pending = False
        self._running = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._running

    def schedule(self) -> None:
        """Queue a refresh pass if one is not already queued."""
        self._pending = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("chronicle refresh skipped (no running event loop)")
            return

        if not self._running:
            task = loop.create_task(self._run_worker())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def refresh(self) -> bool:
        """Run one rollup pass: close any full parts, then update the recent summary."""
        context = self._context_factory()
        entries = self._entry_log.list_entries()
        state = context.chronicle.load_state()
        closed = await self._aggregator.maybe_close_parts(context, state, entries, self._part_size)
        await self._aggregator.recompute_recent_summary(context, state, entries, self._part_size)
        return closed

    async def _run_worker(self) -> None:
        if self._running:
            return

        self._running = True
        try:
            while self._pending:
                self._pending = False
                try:
                    await self.refresh()
                except Exception as exc:
                    logger.error(
                        "chronicle refresh failed",
                        extra={"error": str(exc)},
                    )
        finally:
            self._running = False

    async def drain(self) -> None:
        """Wait for in-flight refresh tasks to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


__all__ = ["ChronicleRefreshScheduler"]
