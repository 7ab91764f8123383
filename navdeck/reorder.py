"""Drag and drop reordering."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

__all__ = ['move', 'DragGesture']

logger = logging.getLogger(__name__)

T = TypeVar('T')


def move(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """Move the element at ``from_index`` so it ends up at ``to_index``.

    Returns ``items`` itself when the move is a no-op (equal or out of range
    indices), so callers can tell with ``is``. Otherwise returns a new list
    in which every other element keeps its relative order.

    >>> move(['/', '/a', '/b'], 2, 0)
    ['/b', '/', '/a']
    """
    n = len(items)
    if from_index == to_index or not (0 <= from_index < n and 0 <= to_index < n):
        return items
    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


class DragGesture(object):
    """One drag of one item, committed only on a valid drop.

    Hover positions are recorded in ``position`` but never committed; the
    commit callback runs at most once, with ``(source, destination)``.
    """

    def __init__(self, source_index: int, size: int, commit: Callable[[int, int], None]):
        self.source_index = source_index
        self.size = size
        self.position: Optional[int] = source_index
        self._commit = commit
        self.finished = False

    def _valid(self, index) -> bool:
        return index is not None and 0 <= index < self.size

    def over(self, index: Optional[int]) -> None:
        if not self.finished:
            self.position = index if self._valid(index) else None

    def drop(self, destination_index: Optional[int] = None) -> bool:
        """Finish the drag; returns whether anything was committed.

        ``None`` means the item was dropped outside any target.
        """
        if self.finished:
            return False
        self.finished = True
        if not self._valid(self.source_index) or not self._valid(destination_index) \
                or destination_index == self.source_index:
            logger.debug(f'drag from {self.source_index} dropped on {destination_index}, ignored')
            return False
        self._commit(self.source_index, destination_index)
        return True

    def cancel(self) -> None:
        self.finished = True
        self.position = None
