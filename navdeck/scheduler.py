"""Follow-up task queues.

A route change must not update the tab state from inside the render pass
that observed it; the update is queued as a zero-delay follow-up task.
Both queues run tasks in the order they were queued.
"""

from __future__ import annotations

import collections
import logging
from typing import Callable

from .core import get_io_loop

__all__ = ['LoopScheduler', 'ManualScheduler']

logger = logging.getLogger(__name__)


class LoopScheduler(object):
    """Queue follow-up tasks on a tornado IOLoop.

    ``IOLoop.add_callback`` runs callbacks on the next loop iteration in
    the order they were added.
    """

    def __init__(self, loop=None):
        self.loop = loop or get_io_loop()

    def call_soon(self, func: Callable, *args) -> None:
        self.loop.add_callback(func, *args)


class ManualScheduler(object):
    """Queue follow-up tasks until the host calls ``run_pending``.

    For hosts that drive their own update cycle (and for tests). Tasks
    queued while ``run_pending`` is running are run in the same call, after
    everything queued before them.
    """

    def __init__(self):
        self._queue = collections.deque()

    def __len__(self):
        return len(self._queue)

    def call_soon(self, func: Callable, *args) -> None:
        self._queue.append((func, args))

    def run_pending(self) -> int:
        n = 0
        while self._queue:
            func, args = self._queue.popleft()
            func(*args)
            n += 1
        return n

    def clear(self) -> None:
        dropped = len(self._queue)
        self._queue.clear()
        if dropped:
            logger.debug(f'dropped {dropped} pending follow-up tasks')
