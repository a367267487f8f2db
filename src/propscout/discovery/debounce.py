"""Single-slot debounce timer.

Each input channel (map viewport, search box) owns one Debouncer. A channel
has at most one pending timer: scheduling again cancels the pending call, so
only the last event of a burst gets through once the input settles.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Delay a callback until events stop arriving for ``delay`` seconds.

    The callback may be a plain function or a coroutine function. Coroutines
    run as tasks once the timer fires. Cancelling the channel only drops the
    pending timer; callbacks that already fired are left to finish.

    Example:
        debouncer = Debouncer(0.3, name="search")
        debouncer.schedule(run_search, "pow")
        debouncer.schedule(run_search, "powai")   # replaces the "pow" call
        await debouncer.wait()
    """

    def __init__(self, delay: float, name: str = "debounce"):
        """Initialize the channel.

        Args:
            delay: Quiet period in seconds
            name: Channel name used in log lines
        """
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self.name = name
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """True while a timer is armed and has not fired yet."""
        return self._handle is not None

    @property
    def running(self) -> bool:
        """True while a fired coroutine callback is still in flight."""
        return bool(self._tasks)

    def schedule(self, callback: Callable[..., Any], *args: Any) -> None:
        """Arm the timer, replacing any pending call on this channel.

        Must be called from inside a running event loop.
        """
        loop = asyncio.get_running_loop()
        if self.cancel():
            logger.debug(f"[{self.name}] superseded pending call")
        self._handle = loop.call_later(self.delay, self._fire, callback, args)

    def cancel(self) -> bool:
        """Drop the pending call, if any.

        Returns:
            True if a pending call was cancelled
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def _fire(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        try:
            result = callback(*args)
        except Exception:
            logger.exception(f"[{self.name}] debounced callback failed")
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"[{self.name}] debounced task failed: {task.exception()}")

    async def wait(self) -> None:
        """Wait until no timer is pending and fired callbacks have finished."""
        loop = asyncio.get_running_loop()
        while self._handle is not None or self._tasks:
            if self._handle is not None:
                await asyncio.sleep(max(self._handle.when() - loop.time(), 0))
            else:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel the pending timer and any in-flight callback tasks."""
        self.cancel()
        for task in list(self._tasks):
            task.cancel()
