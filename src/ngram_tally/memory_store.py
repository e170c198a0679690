"""In-memory counting tree, the default store of a FrequencyModel."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from .nodes import ROOT, Node
from .store import CountingTreeNode, TreeStore


class MemoryNode(CountingTreeNode):
    """
    Tree node holding its children in a dict keyed by `Node`.

    Children enumerate in the order they were first observed, so walks over
    a memory store are reproducible under a fixed random seed.
    """

    def __init__(self, node: Node = ROOT, count: float = 0.0,
                 children: Optional[Dict[Node, "MemoryNode"]] = None):
        self._node = node
        self._count = float(count)
        self.child_map: Dict[Node, MemoryNode] = dict(children or {})

    @property
    def node(self) -> Node:
        return self._node

    @property
    def count(self) -> float:
        return self._count

    @count.setter
    def count(self, value: float) -> None:
        self._count = float(value)

    def children(self) -> Iterator["MemoryNode"]:
        return iter(self.child_map.values())

    def find_child(self, node: Node) -> Optional["MemoryNode"]:
        return self.child_map.get(node)

    def make_child(self, node: Node) -> "MemoryNode":
        child = MemoryNode(node)
        self.child_map[node] = child
        return child

    def __eq__(self, other) -> bool:
        if not isinstance(other, MemoryNode):
            return NotImplemented
        return (self._node == other._node and self._count == other._count
                and self.child_map == other.child_map)

    __hash__ = None

    def __repr__(self) -> str:
        return f"MemoryNode({self._node!r}, count={self._count}, children={len(self.child_map)})"


class MemoryStore(TreeStore):
    def __init__(self, root: Optional[MemoryNode] = None):
        self._root = root if root is not None else MemoryNode(ROOT)

    @property
    def root(self) -> MemoryNode:
        return self._root
