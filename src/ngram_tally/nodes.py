"""
Node Model

Vocabulary of counting-tree nodes plus the two settings that shape a
frequency model: the n-gram order and the kind of sequence being modelled.

A node is either a literal item from an observed sequence or one of five
markers:

- ROOT: anchor of the counting tree, never returned from queries
- SEQUENCE_START / SEQUENCE_END: hard boundaries of a discrete sequence
  (for example a sentence)
- UNSEEN_LEADING / UNSEEN_TRAILING: a continuous sequence carries on before
  or after the observed sample, with items we have not seen
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Optional

from .errors import ConfigurationError


class NodeKind(Enum):
    LITERAL = "literal"
    ROOT = "root"
    SEQUENCE_START = "sequence_start"
    SEQUENCE_END = "sequence_end"
    UNSEEN_LEADING = "unseen_leading"
    UNSEEN_TRAILING = "unseen_trailing"


@dataclass(frozen=True)
class Node:
    """
    A single element of an n-gram.

    Equality and hashing follow the variant: two literals are equal iff
    their items are equal, and each marker is equal only to itself.
    Build literals with `Node.literal(item)` and use the module-level
    marker constants for everything else.
    """
    kind: NodeKind
    item: Any = None

    @classmethod
    def literal(cls, item: Hashable) -> "Node":
        return cls(NodeKind.LITERAL, item)

    @property
    def is_literal(self) -> bool:
        return self.kind is NodeKind.LITERAL

    @property
    def is_boundary_or_root(self) -> bool:
        """True for every marker, False for literal items."""
        return self.kind is not NodeKind.LITERAL

    @property
    def is_observable_boundary(self) -> bool:
        """True only for the unseen-leading and unseen-trailing markers."""
        return self.kind in (NodeKind.UNSEEN_LEADING, NodeKind.UNSEEN_TRAILING)

    def __repr__(self) -> str:
        if self.is_literal:
            return f"Node.literal({self.item!r})"
        return self.kind.name


ROOT = Node(NodeKind.ROOT)
SEQUENCE_START = Node(NodeKind.SEQUENCE_START)
SEQUENCE_END = Node(NodeKind.SEQUENCE_END)
UNSEEN_LEADING = Node(NodeKind.UNSEEN_LEADING)
UNSEEN_TRAILING = Node(NodeKind.UNSEEN_TRAILING)


class SequenceKind(Enum):
    """
    Type of sequence a model represents.

    CONTINUOUS sequences have no meaningful beginning or end (weather
    patterns); DISCRETE sequences do (sentences).
    """
    CONTINUOUS = 0
    DISCRETE = 1

    @property
    def is_continuous(self) -> bool:
        return self is SequenceKind.CONTINUOUS

    @property
    def is_discrete(self) -> bool:
        return self is SequenceKind.DISCRETE

    @property
    def start_node(self) -> Node:
        return UNSEEN_LEADING if self.is_continuous else SEQUENCE_START

    @property
    def end_node(self) -> Node:
        return UNSEEN_TRAILING if self.is_continuous else SEQUENCE_END


@dataclass(frozen=True)
class NgramOrder:
    """
    Maximum number of consecutive nodes a model counts, including the
    node being predicted. Must be at least 2.
    """
    size: int = 2

    def __post_init__(self):
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise ConfigurationError(f"n-gram order must be an int, got {self.size!r}")
        if self.size < 2:
            raise ConfigurationError(f"n-gram order must be >= 2, got {self.size}")

    @classmethod
    def bigram(cls) -> "NgramOrder":
        return cls(2)

    # Same thing, kept for callers that use the other name.
    digram = bigram

    @classmethod
    def trigram(cls) -> "NgramOrder":
        return cls(3)

    @classmethod
    def coerce(cls, value: "NgramOrder | int") -> "NgramOrder":
        return value if isinstance(value, NgramOrder) else cls(value)

    @property
    def context_length(self) -> int:
        return self.size - 1


# Text keys for flat encodings. Root is never written so has no key.
START_TEXT = "Node.SequenceStart"
END_TEXT = "Node.SequenceEnd"
LEADING_TEXT = "Node.UnseenLeadingItems"
TRAILING_TEXT = "Node.UnseenTrailingItems"
LITERAL_PREFIX = "Node.Literal:"

_MARKER_TEXT = {
    SEQUENCE_START: START_TEXT,
    SEQUENCE_END: END_TEXT,
    UNSEEN_LEADING: LEADING_TEXT,
    UNSEEN_TRAILING: TRAILING_TEXT,
}
_TEXT_MARKER = {text: node for node, text in _MARKER_TEXT.items()}


def node_to_text(node: Node) -> Optional[str]:
    """Text form of a node, or None for ROOT."""
    if node.is_literal:
        return LITERAL_PREFIX + str(node.item)
    return _MARKER_TEXT.get(node)


def node_from_text(text: str) -> Optional[Node]:
    """Inverse of `node_to_text`; literals come back as str items."""
    if text in _TEXT_MARKER:
        return _TEXT_MARKER[text]
    if text.startswith(LITERAL_PREFIX):
        return Node.literal(text[len(LITERAL_PREFIX):])
    return None
