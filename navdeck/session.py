"""One user's navigation session.

Wires the permission-filtered menu, the expansion state, the page tabs and
the router together, from login to logout::

    session = NavigationSession(MENU, 'editor', permissions, route_names, router)
    session.tabs.changes.sink(render_tabs)
    session.expansion.changes.sink(render_menu)
    session.activate('4-1')        # menu click -> router -> new tab
    ...
    session.teardown()             # logout
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

import toolz

from .bridge import RouteBridge, Router
from .core import Stream
from .expansion import MenuExpansionController
from .menu import MenuTree
from .permission import RouteNames
from .tabs import TabSessionManager

__all__ = ['NavigationSession']

logger = logging.getLogger(__name__)


class NavigationSession(object):
    """Navigation state of a logged-in user.

    Parameters
    ----------
    menu: iterable of MenuNode or dict
        The full menu configuration; never modified.
    role:
        The user's role, checked with ``permissions``.
    permissions: RoutePermissions or callable ``(path, role) -> bool``
    route_names: RouteNames
    router: Router
    scheduler: optional
        Follow-up task queue for route changes, see ``navdeck.scheduler``.
    """

    def __init__(self, menu: Iterable[Any], role: Any, permissions, route_names: RouteNames,
                 router: Router, scheduler=None, attach: bool = True):
        self.source = MenuTree(menu)
        self.permissions = permissions
        self.route_names = route_names
        self.router = router
        self.role = role
        self.menu = self._filtered_menu(role)

        self.expansion = MenuExpansionController(self.menu)
        self.tabs = TabSessionManager(route_names, scheduler=scheduler)
        self.bridge = RouteBridge(router, self.tabs)
        self.bridge.add_listener(self.expansion.sync_to_path)

        self.refresh_keys: Dict[str, int] = {}
        self.refreshes = Stream(name='refreshes')
        self._collapsed = False
        self.collapses = Stream(name='collapsed')
        self.closed = False

        if attach:
            self.bridge.attach()
        logger.info(f'navigation session started for role {role!r}, '
                    f'{len(self.menu)} menu entries visible')

    def _filtered_menu(self, role: Any) -> MenuTree:
        return self.source.filtered(role, self.permissions)

    def set_role(self, role: Any) -> MenuTree:
        """Rebuild the visible menu for ``role`` from the original configuration."""
        self.role = role
        self.menu = self._filtered_menu(role)
        self.expansion.tree = self.menu
        self.expansion.reset()
        return self.menu

    @property
    def open_keys(self):
        return self.expansion.open_keys

    @property
    def selected_keys(self):
        return self.expansion.selected_keys

    def toggle(self, key: str, will_open: bool):
        return self.expansion.toggle(key, will_open)

    @property
    def collapsed(self) -> bool:
        return self._collapsed

    def set_collapsed(self, collapsed: bool) -> bool:
        """Fold or unfold the sidebar; open menu branches are kept for later."""
        collapsed = bool(collapsed)
        if self.closed or collapsed == self._collapsed:
            return self._collapsed
        self._collapsed = collapsed
        self.collapses.emit(collapsed)
        return collapsed

    def toggle_collapsed(self) -> bool:
        return self.set_collapsed(not self._collapsed)

    def trigger_refresh(self, path: str) -> int:
        """Bump the refresh counter of the page at ``path`` so it reloads."""
        self.refresh_keys = toolz.assoc(self.refresh_keys, path, self.refresh_keys.get(path, 0) + 1)
        self.refreshes.emit((path, self.refresh_keys[path]))
        return self.refresh_keys[path]

    def activate(self, key: str) -> Optional[str]:
        """A menu leaf was clicked: refresh its page and go there.

        Keys the role cannot see, and groups, are ignored. Returns the path
        navigated to.
        """
        if self.closed:
            return None
        node = self.menu.get(key)
        if node is None or not node.is_leaf:
            logger.debug(f'ignoring activation of menu key {key!r}')
            return None
        self.trigger_refresh(node.path)
        self.bridge.navigate(node.path)
        return node.path

    def teardown(self) -> None:
        """Logout: detach from the router and drop all navigation state."""
        if self.closed:
            return
        self.closed = True
        self.bridge.close()
        self.tabs.close()
        self.expansion.reset()
        self.refresh_keys = {}
        logger.info('navigation session closed')
