"""Menu tree model and the role-based menu filter.

Menu keys encode their position as dash-joined segments: ``"5-2-1"`` is the
first child of ``"5-2"``, which is the second child of the root ``"5"``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

__all__ = [
    'MenuNode', 'MenuTree', 'filter_menu', 'find_key_by_path',
    'root_of', 'ancestors_of', 'is_descendant_or_self', 'depth_of',
]

KEY_SEP = '-'


def root_of(key: str) -> str:
    """``"5-2-1"`` -> ``"5"``"""
    return key.split(KEY_SEP)[0]


def ancestors_of(key: str) -> Tuple[str, ...]:
    """``"5-2-1"`` -> ``("5", "5-2", "5-2-1")``"""
    parts = key.split(KEY_SEP)
    return tuple(KEY_SEP.join(parts[:i + 1]) for i in range(len(parts)))


def is_descendant_or_self(key: str, parent: str) -> bool:
    return key == parent or key.startswith(parent + KEY_SEP)


def depth_of(key: str) -> int:
    return key.count(KEY_SEP) + 1


@dataclass(frozen=True)
class MenuNode:
    """A menu entry: a leaf when it has a ``path``, a group when it has children."""
    key: str
    label: str
    path: Optional[str] = None
    children: Tuple['MenuNode', ...] = ()
    icon: Optional[str] = None

    def __post_init__(self):
        if not self.key:
            raise ValueError('menu node needs a non-empty key')
        # accept any sequence, store a tuple so the node stays hashable
        if not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return bool(self.path) and not self.children

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MenuNode':
        try:
            key = str(data['key'])
            label = data['label']
        except KeyError as e:
            raise ValueError(f'menu config entry {data!r} is missing {e}') from e
        return cls(
            key=key,
            label=label,
            path=data.get('path'),
            children=tuple(cls.from_dict(c) for c in data.get('children') or ()),
            icon=data.get('icon'),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {'key': self.key, 'label': self.label}
        if self.path is not None:
            d['path'] = self.path
        if self.icon is not None:
            d['icon'] = self.icon
        if self.children:
            d['children'] = [c.to_dict() for c in self.children]
        return d


def _as_nodes(items: Iterable[Any]) -> List[MenuNode]:
    return [i if isinstance(i, MenuNode) else MenuNode.from_dict(i) for i in items]


def filter_menu(tree: Iterable[Any], role: Any,
                has_permission: Callable[[str, Any], bool]) -> List[MenuNode]:
    """Keep the nodes ``role`` may see, as a freshly built tree.

    A node with a path survives when ``has_permission(path, role)`` holds, and
    its children (if any) are filtered too. A group without a path survives
    when at least one child survives. Anything else is dropped. The input is
    never modified.
    """
    result = []
    for node in _as_nodes(tree):
        if node.path:
            if not has_permission(node.path, role):
                continue
            if node.children:
                node = dataclasses.replace(
                    node, children=tuple(filter_menu(node.children, role, has_permission)))
            result.append(node)
        elif node.children:
            children = filter_menu(node.children, role, has_permission)
            if children:
                result.append(dataclasses.replace(node, children=tuple(children)))
    return result


def find_key_by_path(tree: Iterable[MenuNode], path: str) -> Optional[str]:
    """Key of the first node (depth first) whose path is ``path`` or a parent route of it."""
    for node in tree:
        if node.path and (path == node.path or path.startswith(node.path + '/')):
            return node.key
        if node.children:
            key = find_key_by_path(node.children, path)
            if key:
                return key
    return None


class MenuTree(object):
    """Index over a menu: node, parent and ancestor path per key, built once.

    >>> tree = MenuTree([{'key': '8', 'label': 'Users', 'children': [
    ...     {'key': '8-2', 'label': 'Admin', 'children': [
    ...         {'key': '8-2-1', 'label': 'List', 'path': '/user/admin/list'}]}]}])
    >>> tree.ancestors_of('8-2-1')
    ('8', '8-2', '8-2-1')
    """

    def __init__(self, nodes: Iterable[Any] = ()):
        self.roots: Tuple[MenuNode, ...] = tuple(_as_nodes(nodes))
        self._nodes: Dict[str, MenuNode] = {}
        self._parents: Dict[str, Optional[str]] = {}
        self._ancestors: Dict[str, Tuple[str, ...]] = {}
        self._index(self.roots, None, ())

    def _index(self, nodes: Sequence[MenuNode], parent: Optional[str], path: Tuple[str, ...]):
        for node in nodes:
            if node.key in self._nodes:
                raise ValueError(f'duplicate menu key {node.key!r}')
            self._nodes[node.key] = node
            self._parents[node.key] = parent
            self._ancestors[node.key] = path + (node.key,)
            self._index(node.children, node.key, self._ancestors[node.key])

    def __contains__(self, key) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self):
        return iter(self.roots)

    def get(self, key: str) -> Optional[MenuNode]:
        return self._nodes.get(key)

    def parent_of(self, key: str) -> Optional[str]:
        return self._parents.get(key)

    def ancestors_of(self, key: str) -> Tuple[str, ...]:
        """Ancestor path of ``key``, root first, ending with ``key``.

        Keys that are not in the tree fall back to their dash segments.
        """
        try:
            return self._ancestors[key]
        except KeyError:
            return ancestors_of(key)

    def root_of(self, key: str) -> str:
        return self.ancestors_of(key)[0]

    def find_key_by_path(self, path: str) -> Optional[str]:
        return find_key_by_path(self.roots, path)

    def filtered(self, role: Any, has_permission: Callable[[str, Any], bool]) -> 'MenuTree':
        return MenuTree(filter_menu(self.roots, role, has_permission))
