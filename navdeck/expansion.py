"""Side menu expansion state.

Only one top level branch is expanded at a time; inside that branch any
number of nested groups may be open. Open keys are always kept ordered
parents first, which is the order the menu renders them in.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

import toolz

from .core import Stream
from .menu import MenuTree, ancestors_of, depth_of, is_descendant_or_self, root_of

__all__ = ['MenuExpansionController']

logger = logging.getLogger(__name__)


class MenuExpansionController(object):
    """State machine over the expanded menu keys.

    Parameters
    ----------
    tree: MenuTree, optional
        When given, ancestor paths come from the tree index instead of being
        derived from the key segments.

    Every change is published on ``changes`` as the new tuple of open keys.
    """

    def __init__(self, tree: Optional[MenuTree] = None):
        self.tree = tree
        self._open_keys: Tuple[str, ...] = ()
        self._selected_keys: Tuple[str, ...] = ()
        self.changes = Stream(name='open_keys')

    @property
    def open_keys(self) -> Tuple[str, ...]:
        return self._open_keys

    @property
    def selected_keys(self) -> Tuple[str, ...]:
        return self._selected_keys

    def is_open(self, key: str) -> bool:
        return key in self._open_keys

    def _ancestors(self, key: str) -> Tuple[str, ...]:
        if self.tree is not None:
            return self.tree.ancestors_of(key)
        return ancestors_of(key)

    def _root(self, key: str) -> str:
        return self._ancestors(key)[0]

    def _commit(self, keys: Iterable[str]) -> Tuple[str, ...]:
        keys = tuple(keys)
        if keys != self._open_keys:
            self._open_keys = keys
            self.changes.emit(keys)
        return keys

    def _expand(self, key: str) -> Tuple[str, ...]:
        root = self._root(key)
        kept = [k for k in self._open_keys if self._root(k) == root]
        keys = toolz.unique(kept + list(self._ancestors(key)))
        return tuple(sorted(keys, key=depth_of))

    def _collapse(self, key: str) -> Tuple[str, ...]:
        return tuple(k for k in self._open_keys if not is_descendant_or_self(k, key))

    def toggle(self, key: str, will_open: bool) -> Tuple[str, ...]:
        """Expand or collapse ``key``, returning the new open keys.

        Expanding evicts every other top level branch and opens the whole
        ancestor path of ``key``. Collapsing closes ``key`` and everything
        below it. A call that changes nothing, such as collapsing a key
        that is already closed, closes all branches instead.
        """
        keys = ()
        if key:
            keys = self._expand(key) if will_open else self._collapse(key)
        if keys == self._open_keys or not key:
            logger.debug(f'toggle {key!r} open={will_open} changed nothing, clearing open keys')
            return self._commit(())
        logger.debug(f'toggle {key} open={will_open}: {self._open_keys} -> {keys}')
        return self._commit(keys)

    def on_open_change(self, new_open_keys: Iterable[str]) -> Tuple[str, ...]:
        """Apply the open set reported by the menu widget.

        The widget reports the whole set after a click; the operated key is
        the first key it added, otherwise the first key it removed. When the
        reported set equals the current one there is nothing to operate on
        and all branches are closed.
        """
        new_open_keys = list(new_open_keys)
        added = [k for k in new_open_keys if k not in self._open_keys]
        removed = [k for k in self._open_keys if k not in new_open_keys]
        if added:
            return self.toggle(added[0], True)
        if removed:
            return self.toggle(removed[0], False)
        return self._commit(())

    def sync_to_path(self, path: str) -> Optional[str]:
        """Select the menu entry for ``path`` and open its branch.

        Returns the selected key, or None when no entry matches (the
        selection is cleared and the open keys are left as they are).
        """
        if self.tree is None:
            return None
        key = self.tree.find_key_by_path(path)
        if key is None:
            self._selected_keys = ()
            return None
        self._selected_keys = (key,)
        self._commit(self._ancestors(key))
        return key

    def reset(self) -> None:
        self._selected_keys = ()
        self._commit(())
