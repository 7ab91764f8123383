"""Page tabs: the ordered list of visited pages kept open for quick return.

The manager owns ``(tabs, active_key)``. After every operation ``tabs`` is
non-empty and ``active_key`` is the key of one of its tabs. Rejected
operations (closing the last tab, closing the others when there are none)
publish a notice and leave the state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .bus import warn
from .config import config
from .core import Stream
from .permission import RouteNames
from .reorder import DragGesture, move
from .scheduler import LoopScheduler

__all__ = [
    'TabItem', 'TabSnapshot', 'Notice', 'TabSessionManager',
    'CANNOT_CLOSE_LAST_TAB', 'NOTHING_TO_CLOSE',
]

logger = logging.getLogger(__name__)

CANNOT_CLOSE_LAST_TAB = 'cannot_close_last_tab'
NOTHING_TO_CLOSE = 'nothing_to_close'


@dataclass(frozen=True)
class TabItem:
    key: str
    label: str


@dataclass(frozen=True)
class TabSnapshot:
    tabs: Tuple[TabItem, ...]
    active_key: str

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(t.key for t in self.tabs)


@dataclass(frozen=True)
class Notice:
    """A transient, non-blocking message for the user."""
    kind: str
    message: str

    def to_record(self) -> Dict[str, Any]:
        return {'level': 'WARNING', 'source': 'navdeck.tabs',
                'message': self.message, 'kind': self.kind}


class TabSessionManager(object):
    """Ordered open tabs plus the active one.

    Parameters
    ----------
    route_names: RouteNames
        Routes that may become tabs, and their labels.
    scheduler: optional
        Where route changes queue their follow-up task; defaults to a
        ``LoopScheduler`` on the current IOLoop.
    home_path: str, optional
        Key of the tab the session starts with and resets to.

    Outputs
    -------
    changes: Stream of TabSnapshot, after every state change
    navigations: Stream of paths the router should go to
    notices: Stream of Notice, recent ones kept in an expiring cache
    """

    def __init__(self, route_names: RouteNames, scheduler=None, home_path: Optional[str] = None):
        self.route_names = route_names
        self._scheduler = scheduler
        self.home_path = home_path or config.get('tabs.home_path')

        notice_config = config.get_notice_config()
        self._messages = {
            CANNOT_CLOSE_LAST_TAB: notice_config['cannot_close_last_tab'],
            NOTHING_TO_CLOSE: notice_config['nothing_to_close'],
        }

        self.changes = Stream(name='tabs')
        self.navigations = Stream(name='navigations')
        self.notices = Stream(
            name='notices',
            cache_max_len=notice_config['cache_max_len'],
            cache_max_age_seconds=notice_config['cache_max_age_seconds'],
        )
        self._notice_sink = self.notices.map(Notice.to_record).sink(warn.emit)

        self._tabs: Tuple[TabItem, ...] = (self._home_tab(),)
        self._active_key: str = self.home_path
        self.closed = False

    @property
    def scheduler(self):
        if self._scheduler is None:
            self._scheduler = LoopScheduler()
        return self._scheduler

    @property
    def tabs(self) -> Tuple[TabItem, ...]:
        return self._tabs

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(t.key for t in self._tabs)

    @property
    def active_key(self) -> str:
        return self._active_key

    def snapshot(self) -> TabSnapshot:
        return TabSnapshot(self._tabs, self._active_key)

    def _home_tab(self) -> TabItem:
        return TabItem(self.home_path, self.route_names.lookup(self.home_path))

    def _index_of(self, key: str) -> Optional[int]:
        for i, tab in enumerate(self._tabs):
            if tab.key == key:
                return i
        return None

    def _set(self, tabs=None, active_key=None) -> bool:
        tabs = self._tabs if tabs is None else tuple(tabs)
        active_key = self._active_key if active_key is None else active_key
        if tabs == self._tabs and active_key == self._active_key:
            return False
        self._tabs, self._active_key = tabs, active_key
        self.changes.emit(self.snapshot())
        return True

    def _navigate(self, path: str) -> None:
        logger.debug(f'navigate to {path}')
        self.navigations.emit(path)

    def _notify(self, kind: str) -> None:
        notice = Notice(kind, self._messages[kind])
        logger.info(f'rejected: {notice.message}')
        self.notices.emit(notice)

    # route -> tabs

    def on_route_change(self, path: str) -> None:
        """The router moved to ``path``: open (or just activate) its tab.

        Unroutable paths are ignored. The update runs as a queued follow-up
        task, never inside the caller.
        """
        if self.closed or not self.route_names.is_routable(path):
            logger.debug(f'ignoring route change to {path!r}')
            return
        self.scheduler.call_soon(self._open_route, path)

    def _open_route(self, path: str) -> None:
        if self.closed:
            return
        tabs = self._tabs
        if self._index_of(path) is None:
            tabs = tabs + (TabItem(path, self.route_names.lookup(path)),)
        self._set(tabs, path)

    # user operations

    def on_tab_select(self, key: str) -> None:
        if key == self._active_key or self._index_of(key) is None:
            return
        self._set(active_key=key)
        self._navigate(key)

    def on_tab_close(self, key: str) -> bool:
        """Close the tab ``key``; returns whether it was closed.

        When the active tab closes, the tab that slides into its index
        becomes active, or the new last tab when it was the last one.
        """
        if len(self._tabs) == 1:
            self._notify(CANNOT_CLOSE_LAST_TAB)
            return False
        idx = self._index_of(key)
        if idx is None:
            return False
        new_tabs = self._tabs[:idx] + self._tabs[idx + 1:]
        if key != self._active_key:
            self._set(new_tabs)
            return True
        new_active_idx = idx - 1 if idx >= len(new_tabs) else idx
        active_key = new_tabs[new_active_idx].key
        self._set(new_tabs, active_key)
        self._navigate(active_key)
        return True

    def on_close_others(self) -> bool:
        if len(self._tabs) <= 1:
            self._notify(NOTHING_TO_CLOSE)
            return False
        self._set(tuple(t for t in self._tabs if t.key == self._active_key))
        self._navigate(self._active_key)
        return True

    def on_close_all(self) -> None:
        self._set((self._home_tab(),), self.home_path)
        self._navigate(self.home_path)

    def on_reorder(self, from_index: int, to_index: int) -> bool:
        moved = move(self._tabs, from_index, to_index)
        if moved is self._tabs:
            return False
        return self._set(moved)

    def begin_drag(self, source_index: int) -> DragGesture:
        return DragGesture(source_index, len(self._tabs), self.on_reorder)

    def close(self) -> None:
        """End of session: stop accepting route changes and detach the log sink."""
        self.closed = True
        self._notice_sink.destroy()
