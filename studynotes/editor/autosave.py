"""
StudyNotes — Autosave Scheduler
================================

What:  Debounces editor changes into at most one save per burst of edits.
How:   Each notify() with changed watched values cancels the pending
       asyncio timer and starts a new one; when a timer survives the quiet
       period the save action runs. Coroutine results are run as tasks.
Who:   Owned by EditorSession, fed from EditorState change notifications.

Teardown (close) cancels the pending timer so a save can never fire for an
editor that is gone. A save that is already running is left to finish.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence, Set, Tuple

from studynotes.config import settings

logger = logging.getLogger(__name__)


def _changed(previous: Sequence[Any], current: Sequence[Any]) -> bool:
    """Element-wise shallow comparison: identical or equal means unchanged."""
    if len(previous) != len(current):
        return True
    return any(old is not new and old != new for old, new in zip(previous, current))


class AutosaveScheduler:
    """
    Usage:
        scheduler = AutosaveScheduler(session.save, delay_ms=1500)
        state.subscribe(lambda s: scheduler.notify(s.watched_values()))
        ...
        scheduler.close()
    """

    def __init__(
        self,
        save_action: Callable[[], Any],
        delay_ms: Optional[int] = None,
    ) -> None:
        self._save_action = save_action
        self.delay_ms = delay_ms if delay_ms is not None else settings.autosave_delay_ms
        self._handle: Optional[asyncio.TimerHandle] = None
        self._previous: Optional[Tuple[Any, ...]] = None
        self._tasks: Set["asyncio.Task[Any]"] = set()
        self._closed = False

    @property
    def pending(self) -> bool:
        """Whether a save is currently scheduled."""
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def notify(self, watched_values: Sequence[Any]) -> bool:
        """
        Report the current watched values. Returns True when this restarted
        the timer (the first report always does).
        """
        if self._closed:
            return False

        values = tuple(watched_values)
        if self._previous is not None and not _changed(self._previous, values):
            return False
        self._previous = values
        self.reschedule()
        return True

    def reschedule(self) -> bool:
        """Restart the quiet period without a change report."""
        if self._closed:
            return False
        self._cancel_pending()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_ms / 1000, self._fire)
        return True

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        result = self._save_action()
        if asyncio.iscoroutine(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_save_done)

    def _on_save_done(self, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Autosave failed: %s", task.exception())

    async def wait_idle(self) -> None:
        """Wait for saves already started by the timer to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def close(self) -> None:
        """Cancel the pending save and ignore later notifications."""
        self._closed = True
        self._cancel_pending()
