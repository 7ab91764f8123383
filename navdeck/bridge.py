"""Glue between the host router and the navigation controllers.

Inbound, every path the router reports is handed to the listeners (the tab
manager first). Outbound, navigation intents are delivered to the router in
the order they were issued.
"""

from __future__ import annotations

import abc
import logging
from typing import Callable, List, Optional

__all__ = ['Router', 'MemoryRouter', 'RouteBridge']

logger = logging.getLogger(__name__)


class Router(abc.ABC):
    """What the controllers need from the host router."""

    @abc.abstractmethod
    def current_path(self) -> str:
        ...

    @abc.abstractmethod
    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Call ``callback(path)`` on every path change; returns an unsubscribe function."""

    @abc.abstractmethod
    def navigate(self, path: str, replace: bool = False) -> None:
        ...


class MemoryRouter(Router):
    """In-memory history router.

    ``navigate`` pushes (or replaces) a history entry and notifies the
    subscribers synchronously; ``back`` simulates the browser's back button,
    a path change the controllers did not ask for.
    """

    def __init__(self, initial_path: str = '/'):
        self.history: List[str] = [initial_path]
        self._subscribers: List[Callable[[str], None]] = []

    def current_path(self) -> str:
        return self.history[-1]

    def subscribe(self, callback):
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self):
        path = self.current_path()
        for callback in list(self._subscribers):
            callback(path)

    def navigate(self, path, replace=False):
        if replace:
            self.history[-1] = path
        else:
            self.history.append(path)
        self._notify()

    def back(self) -> bool:
        if len(self.history) < 2:
            return False
        self.history.pop()
        self._notify()
        return True


class RouteBridge(object):
    """Two way adapter between a ``Router`` and a tab manager.

    Parameters
    ----------
    router: Router
    tabs: TabSessionManager
        Receives ``on_route_change``; its ``navigations`` stream is sent to
        the router.
    """

    def __init__(self, router: Router, tabs):
        self.router = router
        self.tabs = tabs
        self._listeners: List[Callable[[str], None]] = [tabs.on_route_change]
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._navigation_sink = None

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def add_listener(self, listener: Callable[[str], None]) -> None:
        """Also call ``listener(path)`` on route changes, after the tab manager."""
        self._listeners.append(listener)

    def attach(self, replay: bool = True) -> 'RouteBridge':
        """Start delivering in both directions.

        With ``replay`` the router's current path is delivered once right
        away, as the first route change of the session.
        """
        if self.attached:
            return self
        self._unsubscribe = self.router.subscribe(self._on_path)
        self._navigation_sink = self.tabs.navigations.sink(self.navigate)
        if replay:
            self._on_path(self.router.current_path())
        return self

    def _on_path(self, path: str) -> None:
        logger.debug(f'route changed to {path}')
        for listener in self._listeners:
            listener(path)

    def navigate(self, path: str, replace: bool = False) -> None:
        if not self.attached:
            logger.debug(f'bridge detached, dropping navigation to {path}')
            return
        self.router.navigate(path, replace=replace)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._navigation_sink is not None:
            self._navigation_sink.destroy()
            self._navigation_sink = None
