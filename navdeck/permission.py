"""Route tables: who may open a route, and what its tab is called."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from .config import config

__all__ = ['RoutePermissions', 'RouteNames']

logger = logging.getLogger(__name__)

WILDCARD = '*'


class RoutePermissions(object):
    """Roles allowed per route.

    Keys are exact paths (``"/dashboard"``) or wildcard prefixes
    (``"/goods/*"`` covers every route under ``/goods/``). An exact entry
    always wins; otherwise the first wildcard entry, in table order, whose
    prefix starts the path decides. Routes not covered at all are denied.

    >>> perms = RoutePermissions({'/dashboard': ['admin', 'editor'], '/user/*': ['admin']})
    >>> perms.has_permission('/user/admin/list', 'editor')
    False
    """

    def __init__(self, table: Optional[Mapping[str, Iterable[Any]]] = None):
        self._exact: Dict[str, frozenset] = {}
        self._wildcards = []
        for path, roles in (table or {}).items():
            self.allow(path, roles)

    def allow(self, path: str, roles: Iterable[Any]) -> None:
        roles = frozenset(roles)
        if path.endswith(WILDCARD):
            self._wildcards.append((path.replace(WILDCARD, ''), roles))
        else:
            self._exact[path] = roles

    def roles_for(self, path: str) -> Optional[frozenset]:
        if path in self._exact:
            return self._exact[path]
        for prefix, roles in self._wildcards:
            if path.startswith(prefix):
                return roles
        return None

    def has_permission(self, path: str, role: Any) -> bool:
        roles = self.roles_for(path)
        if roles is None:
            logger.debug(f'no permission entry for {path}, denying {role}')
            return False
        return role in roles

    __call__ = has_permission


class RouteNames(object):
    """Static route -> display name table.

    Only routes listed here are routable: the tab manager ignores the rest.
    ``lookup`` answers with the configured sentinel for unlisted routes.
    """

    def __init__(self, table: Optional[Mapping[str, str]] = None, unknown_label: Optional[str] = None):
        self._names = dict(table or {})
        self.unknown_label = unknown_label if unknown_label is not None \
            else config.get('routes.unknown_label')

    def __contains__(self, path) -> bool:
        return bool(path) and path in self._names

    def __len__(self) -> int:
        return len(self._names)

    def is_routable(self, path: str) -> bool:
        return path in self

    def lookup(self, path: str) -> str:
        return self._names.get(path, self.unknown_label)

    __call__ = lookup
