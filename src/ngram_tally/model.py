"""
Frequency Model Module

`FrequencyModel` observes sequences of items and keeps counts for every
n-gram order up to the configured maximum at the same time. A single
observed item bumps its unigram count, the bigram ending in it, the
trigram ending in it and so on, which is what lets queries with any
context length up to `order.size - 1` find data.

Usage:
    model = FrequencyModel(SequenceKind.DISCRETE, order=3)
    model.observe_sequence(["the", "cat", "sat"])
    model.probabilities_after(["the"])
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, Tuple

from .errors import StoreError, TallyError
from .memory_store import MemoryStore
from .nodes import NgramOrder, Node, SequenceKind
from .store import ItemProbability, TallyStore, backend_errors

logger = logging.getLogger(__name__)

Normalizer = Callable[[Hashable], Hashable]


class FrequencyModel:
    """
    Frequency model of n-grams built from observed sequences.

    Not thread-safe: serialize calls to the `observe` family yourself when
    several writers share a model or store.

    Attributes:
        sequence_kind: Continuous or discrete sequences
        order: Largest n-gram counted
        normalizer: Applied to every item before it is observed or queried
        store: Where counts live (in memory unless one is passed in)
    """

    def __init__(self,
                 sequence_kind: SequenceKind = SequenceKind.CONTINUOUS,
                 order: NgramOrder | int = 2,
                 normalizer: Optional[Normalizer] = None,
                 store: Optional[TallyStore] = None):
        self.sequence_kind = SequenceKind(sequence_kind)
        self.order = NgramOrder.coerce(order)
        self.normalizer = normalizer
        self.store: TallyStore = store if store is not None else MemoryStore()
        self._window: deque = deque(maxlen=self.order.size)

    def __repr__(self) -> str:
        return (f"FrequencyModel({self.sequence_kind.name}, order={self.order.size}, "
                f"store={type(self.store).__name__})")

    @property
    def start_node(self) -> Node:
        return self.sequence_kind.start_node

    @property
    def end_node(self) -> Node:
        return self.sequence_kind.end_node

    @property
    def recently_observed(self) -> Tuple[Node, ...]:
        """Current observation window, oldest first."""
        return tuple(self._window)

    def _normalize(self, item: Hashable) -> Hashable:
        return self.normalizer(item) if self.normalizer else item

    # ------------------------------------------------------------------
    # Observing
    # ------------------------------------------------------------------

    def start_sequence(self) -> None:
        """Begin a new observed sequence."""
        self._window.clear()
        self._observe_node(self.start_node)

    def observe(self, item: Hashable) -> None:
        """
        Observe the next item of the current sequence.

        Call between `start_sequence()` and `end_sequence()`.
        """
        self._observe_node(Node.literal(self._normalize(item)))

    def end_sequence(self) -> None:
        """Finish the current observed sequence."""
        self._observe_node(self.end_node)
        self._window.clear()

    def observe_sequence(self, items: Iterable[Hashable],
                         completed: Optional[Callable[[], None]] = None) -> Optional[Future]:
        """
        Observe a whole sequence; no start/end calls are needed around it.

        Without `completed` every increment runs synchronously. With it,
        increments go through the store's `increment_async` and `completed`
        is called once all of them have finished. The returned future
        resolves at the same point, or carries the first backend failure.
        """
        if completed is None:
            self.start_sequence()
            for item in items:
                self.observe(item)
            self.end_sequence()
            return None

        self._window.clear()
        futures = self._observe_node(self.start_node, asynchronous=True)
        for item in items:
            futures += self._observe_node(Node.literal(self._normalize(item)), asynchronous=True)
        futures += self._observe_node(self.end_node, asynchronous=True)
        self._window.clear()

        return _join(futures, completed)

    def _observe_node(self, node: Node, asynchronous: bool = False) -> List[Future]:
        # deque(maxlen=order) drops the oldest node once full
        self._window.append(node)
        window = list(self._window)

        futures = []
        with backend_errors("increment"):
            for length in range(1, len(window) + 1):
                ngram = window[-length:]
                if asynchronous:
                    futures.append(self.store.increment_async(ngram))
                else:
                    self.store.increment(ngram)
        return futures

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def distributions(self, excluding: Iterable[Node] = ()) -> List[ItemProbability]:
        """Overall relative frequency of items, optionally leaving some out."""
        with backend_errors("query"):
            return self.store.distributions(excluding)

    def starting_items(self) -> List[ItemProbability]:
        """
        Distribution of items that start a sequence.

        Continuous sequences have no real start, so the overall distribution
        stands in for it.
        """
        if self.sequence_kind.is_continuous:
            return self.distributions()
        return self.probabilities_after_nodes([self.start_node])

    def probabilities_after(self, items: Sequence[Hashable]) -> List[ItemProbability]:
        """
        Probabilities of the nodes observed to follow `items`.

        Sequences longer than `order.size - 1` are clamped to their most
        recent items. An empty result means the sequence was never seen.
        """
        nodes = [Node.literal(self._normalize(item)) for item in items]
        return self.probabilities_after_nodes(nodes)

    def probabilities_after_item(self, item: Hashable) -> List[ItemProbability]:
        return self.probabilities_after([item])

    def probabilities_after_nodes(self, nodes: Sequence[Node]) -> List[ItemProbability]:
        nodes = list(nodes)
        limit = self.order.context_length
        if len(nodes) > limit:
            logger.warning(
                f"Matching {len(nodes)} items exceeds the n-gram size of {self.order.size}; "
                f"clamped to the last {limit}"
            )
            nodes = nodes[-limit:]

        logger.debug(f"Getting probabilities following {nodes}")
        with backend_errors("query"):
            return self.store.probabilities_after(nodes)


def _join(futures: List[Future], completed: Callable[[], None]) -> Future:
    """Future that finishes once every increment in `futures` has finished."""
    joined: Future = Future()
    remaining = [len(futures)]
    lock = threading.Lock()

    def _one_done(_):
        with lock:
            remaining[0] -= 1
            if remaining[0]:
                return

        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            logger.error(f"{len(errors)} of {len(futures)} increments failed: {errors[0]}")
            joined.set_exception(_as_store_error(errors[0]))
            return
        try:
            completed()
        except Exception as exc:
            logger.error(f"Completion callback failed: {exc}")
            joined.set_exception(exc)
            return
        joined.set_result(None)

    for future in futures:
        future.add_done_callback(_one_done)
    return joined


def _as_store_error(error: BaseException) -> BaseException:
    if isinstance(error, TallyError):
        return error
    wrapped = StoreError(f"store increment failed: {error}")
    wrapped.__cause__ = error
    return wrapped
