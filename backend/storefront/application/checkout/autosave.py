"""
Debounced draft persistence for in-progress order captures.

A burst of ``notify`` calls inside one quiet period collapses into a
single store write. The draft row for a session is resolved once
(remembered id, then an open row for the session, then a fresh insert)
and reused for every later write. After ``mark_converted`` the row is
never written again.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from .collaborators import DraftStore

logger = logging.getLogger(__name__)


class DebouncedTask:
    """
    Single pending call, rescheduled on every ``schedule``.

    A call that has already started is left to finish; only a call still
    waiting out its delay is cancelled.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]):
        self.delay = delay
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self._firing: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        task = self._task
        return task is not None and not task.done() and task is not self._firing

    def schedule(self) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the currently scheduled call, if any."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        self._firing = asyncio.current_task()
        try:
            await self._callback()
        finally:
            if self._firing is asyncio.current_task():
                self._firing = None


class DraftAutosaver:
    def __init__(self, store: DraftStore, session_id: str, *, delay: float = 1.0):
        self.store = store
        self.session_id = session_id
        self.draft_id: Optional[str] = None
        self.converted = False
        self.closed = False
        self._snapshot: Optional[Dict[str, Any]] = None
        self._lock = asyncio.Lock()
        self._debounce = DebouncedTask(delay, self._save)

    def notify(self, snapshot: Dict[str, Any]) -> None:
        if self.converted or self.closed:
            return
        self._snapshot = snapshot
        self._debounce.schedule()

    async def flush(self) -> None:
        """Write the latest snapshot now instead of waiting for the timer."""
        self._debounce.cancel()
        await self._save()

    async def wait(self) -> None:
        await self._debounce.wait()

    async def mark_converted(self) -> None:
        self._debounce.cancel()
        async with self._lock:
            if self.converted:
                return
            self.converted = True
            try:
                draft_id = self.draft_id or await self.store.find_open(self.session_id)
                if draft_id:
                    await self.store.mark_converted(draft_id)
                    self.draft_id = draft_id
            except Exception:
                logger.warning(
                    "Could not mark draft converted for session %s",
                    self.session_id,
                    exc_info=True,
                )

    def close(self) -> None:
        self.closed = True
        self._debounce.cancel()

    async def _save(self) -> None:
        async with self._lock:
            if self.converted or self._snapshot is None:
                return
            snapshot = self._snapshot
            try:
                if self.draft_id is None:
                    self.draft_id = await self.store.find_open(self.session_id)

                if self.draft_id is None:
                    self.draft_id = await self.store.create(self.session_id, snapshot)
                else:
                    await self.store.update(self.draft_id, snapshot)
            except Exception:
                logger.warning(
                    "Draft autosave failed for session %s",
                    self.session_id,
                    exc_info=True,
                )
