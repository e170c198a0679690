"""
Counting Tree Contract

A frequency model keeps its counts in a tree where every path from the
root spells an n-gram. For the five bigrams (A B), (A C), (B C), (B D),
(B D) the tree looks like:

            *root
          /       \\
        A(2)       B(3)
        / \\        / \\
     B(1) C(1)  C(1) D(2)

Backends implement `CountingTreeNode` (count, children, find/make child)
and inherit the increment and probability algorithms from it. A
`TreeStore` wraps the root node and is what `FrequencyModel` talks to.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future
from contextlib import contextmanager
from typing import Iterable, List, NamedTuple, Optional, Sequence

from .errors import PreconditionError, StoreError, TallyError
from .nodes import ROOT, Node

logger = logging.getLogger(__name__)


class ItemProbability(NamedTuple):
    probability: float
    node: Node


def _head_and_tail(path: Sequence[Node]):
    if not path:
        raise PreconditionError("path can not be empty")
    return path[0], path[1:]


class CountingTreeNode(ABC):
    """
    One node of a counting tree.

    Subclasses provide storage; the recursive algorithms below only use
    `node`, `count`, `children()`, `find_child()` and `make_child()`.
    """

    @property
    @abstractmethod
    def node(self) -> Node:
        """The n-gram element this tree node represents."""

    @property
    @abstractmethod
    def count(self) -> float:
        """How often the path ending here was observed."""

    @count.setter
    @abstractmethod
    def count(self, value: float) -> None:
        ...

    @abstractmethod
    def children(self) -> Iterable["CountingTreeNode"]:
        """Child nodes. May be a lazy iterable for large or persisted trees."""

    @abstractmethod
    def find_child(self, node: Node) -> Optional["CountingTreeNode"]:
        ...

    @abstractmethod
    def make_child(self, node: Node) -> "CountingTreeNode":
        """
        Create, attach and return a new child.

        Only called after `find_child` returned None, so implementations
        don't need to check for an existing child.
        """

    def _check_head(self, head: Node) -> None:
        if head != self.node:
            raise PreconditionError(
                f"path starts at {head!r} but was applied to {self.node!r}"
            )

    def increment_path(self, path: Sequence[Node]) -> None:
        """Add one to the count at the end of `path`, creating nodes on the way."""
        head, tail = _head_and_tail(path)
        self._check_head(head)

        if tail:
            child = self.find_child(tail[0])
            if child is None:
                child = self.make_child(tail[0])
            child.increment_path(tail)
        else:
            self.count += 1

    def probabilities_after(self, path: Sequence[Node]) -> List[ItemProbability]:
        """Probabilities of the nodes observed to follow `path`."""
        head, tail = _head_and_tail(path)
        self._check_head(head)

        if tail:
            child = self.find_child(tail[0])
            if child is None:
                return []
            return child.probabilities_after(tail)

        children = list(self.children())
        total = sum(child.count for child in children)
        if total <= 0:
            return []
        return [ItemProbability(child.count / total, child.node) for child in children]

    def distributions(self, excluding: Iterable[Node] = ()) -> List[ItemProbability]:
        """Relative frequency of literal children, ignoring markers and `excluding`."""
        excluded = set(excluding)
        children = [
            child for child in self.children()
            if not child.node.is_boundary_or_root and child.node not in excluded
        ]
        total = sum(child.count for child in children)
        if total <= 0:
            return []
        return [ItemProbability(child.count / total, child.node) for child in children]


class TallyStore(ABC):
    """What a `FrequencyModel` needs from its storage."""

    @abstractmethod
    def increment(self, ngram: Sequence[Node]) -> None:
        ...

    @abstractmethod
    def probabilities_after(self, nodes: Sequence[Node]) -> List[ItemProbability]:
        ...

    @abstractmethod
    def distributions(self, excluding: Iterable[Node] = ()) -> List[ItemProbability]:
        ...

    def increment_async(self, ngram: Sequence[Node]) -> Future:
        """
        Increment and report completion through a future.

        Stores that write asynchronously override this. The default runs
        `increment` inline and hands back an already finished future;
        a failure is set on the future as a `StoreError`, never raised.
        """
        future: Future = Future()
        try:
            with backend_errors("increment"):
                self.increment(ngram)
        except TallyError as exc:
            future.set_exception(exc)
        else:
            future.set_result(None)
        return future


class TreeStore(TallyStore):
    """A store backed by a `CountingTreeNode` root."""

    @property
    @abstractmethod
    def root(self) -> CountingTreeNode:
        ...

    def increment(self, ngram: Sequence[Node]) -> None:
        with backend_errors("increment"):
            self.root.increment_path([ROOT, *ngram])

    def probabilities_after(self, nodes: Sequence[Node]) -> List[ItemProbability]:
        with backend_errors("query"):
            return self.root.probabilities_after([ROOT, *nodes])

    def distributions(self, excluding: Iterable[Node] = ()) -> List[ItemProbability]:
        with backend_errors("query"):
            return self.root.distributions(excluding)


@contextmanager
def backend_errors(operation: str):
    """Re-raise non-ngram_tally exceptions from a backend as StoreError."""
    try:
        yield
    except TallyError:
        raise
    except Exception as exc:
        logger.error(f"Store {operation} failed: {exc}")
        raise StoreError(f"store {operation} failed: {exc}") from exc
