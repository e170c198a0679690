"""
Walker Module

Generates new sequences by random walks over a `FrequencyModel`. Each step
is drawn from the distribution of items that followed the last few steps.

For continuous models the walker always produces an item: when a walk runs
into an unseen-boundary marker it falls back to the overall distribution,
and when nothing follows the current context it shortens the context until
something does. For discrete models reaching the end marker ends the
sequence, and `next_item()` returns None.

Usage:
    walker = Walker(model, WalkMode.markov_chain(), rng=42)
    walker.fill(10)
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence, Union

import numpy as np

from .errors import ConfigurationError, PreconditionError
from .model import FrequencyModel
from .nodes import Node
from .store import ItemProbability

logger = logging.getLogger(__name__)

RandomSource = Union[None, int, np.random.Generator]


@dataclass(frozen=True)
class WalkMode:
    """
    How many previous steps to look at when choosing the next one.

    Use the constructors: `markov_chain()` looks at the last step only,
    `match_model()` at as many as the model supports, `fixed_steps(k)` at k.
    """
    name: str
    length: Optional[int] = None

    @classmethod
    def markov_chain(cls) -> "WalkMode":
        return cls("markov_chain", 1)

    @classmethod
    def match_model(cls) -> "WalkMode":
        return cls("match_model")

    @classmethod
    def fixed_steps(cls, steps: int) -> "WalkMode":
        if steps < 1:
            raise ConfigurationError(f"walk steps must be >= 1, got {steps}")
        return cls("fixed_steps", steps)

    @classmethod
    def from_name(cls, name: str, steps: Optional[int] = None) -> "WalkMode":
        if name == "markov_chain":
            return cls.markov_chain()
        if name == "match_model":
            return cls.match_model()
        if name == "fixed_steps":
            if steps is None:
                raise ConfigurationError("fixed_steps walk mode needs a step count")
            return cls.fixed_steps(steps)
        raise ConfigurationError(f"Unknown walk mode: {name!r}")

    def context_length(self, model: FrequencyModel) -> int:
        if self.length is None:
            return model.order.context_length
        return self.length


def weighted_choice(possible: Sequence[ItemProbability], draw: float) -> Node:
    """
    Pick a node by inverse-CDF sampling.

    Probabilities become lower limits by subtracting them in list order
    from 1.0, e.g. (0.25, 0.5, 0.25) -> (0.75, 0.25, 0.0). The first entry
    whose limit is below `draw` wins, so list order settles ties.
    """
    if not possible:
        raise PreconditionError("can not choose from zero possibilities")

    remaining = 1.0
    for probability, node in possible:
        remaining -= probability
        if remaining < draw:
            return node
    # rounding left every limit at or above the draw
    return possible[-1].node


class Walker:
    """
    Random walk over a frequency model. Reads the model, never changes it.

    Not thread-safe; give each thread its own walker.

    Attributes:
        model: Frequency model to walk
        mode: Context length policy
        rng: numpy Generator the steps are drawn from
        is_new_sequence: Next call starts a fresh sequence
        last_steps: Most recent literal steps, oldest first
    """

    def __init__(self, model: FrequencyModel, mode: Optional[WalkMode] = None,
                 rng: RandomSource = None):
        self.model = model
        self.mode = mode or WalkMode.match_model()
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        self.is_new_sequence = True
        self.last_steps: List[Node] = []

    def __iter__(self):
        return self

    def __next__(self) -> Hashable:
        item = self.next_item()
        if item is None:
            raise StopIteration
        return item

    def end_walk(self) -> None:
        """Make the next call to `next_item()` start a new sequence."""
        self.is_new_sequence = True
        self.last_steps = []

    def fill(self, request: int) -> List[Hashable]:
        """
        Generate up to `request` items.

        Discrete models start a fresh sequence on every fill and may return
        fewer items when the walk reaches the end of a sequence. Continuous
        models always return `request` items unless the model is empty.
        """
        if self.model.sequence_kind.is_discrete:
            self.end_walk()
        return list(itertools.islice(self, request))

    def _choose(self, possible: Sequence[ItemProbability]) -> Node:
        if len(possible) == 1:
            return possible[0].node
        return weighted_choice(possible, float(self.rng.random()))

    def next_item(self) -> Optional[Hashable]:
        """
        Next item of the walk, or None at the end of a discrete sequence
        (and always for an empty model).
        """
        starting = self.model.starting_items()
        if not starting:
            logger.warning("Attempting to generate an item from an empty model")
            return None

        if self.is_new_sequence:
            self.is_new_sequence = False
            step = self._choose(starting)
            self.last_steps = [step] if step.is_literal else []
            return step.item

        context = self.mode.context_length(self.model)
        self.last_steps = self.last_steps[-context:] if context > 0 else []

        if self.model.sequence_kind.is_discrete:
            return self._next_discrete()
        return self._next_continuous()

    def _next_discrete(self) -> Optional[Hashable]:
        possible = self.model.probabilities_after_nodes(self.last_steps)
        if not possible:
            logger.debug(f"Nothing observed after {self.last_steps}, ending sequence")
            return None

        step = self._choose(possible)
        if step.is_literal:
            self.last_steps.append(step)
        return step.item

    def _next_continuous(self) -> Hashable:
        while True:
            if not self.last_steps:
                # root level distribution only holds literals and is non-empty here
                step = self._choose(self.model.starting_items())
                break

            possible = self.model.probabilities_after_nodes(self.last_steps)
            if possible:
                step = self._choose(possible)
                if step.is_literal:
                    break

                if step.is_observable_boundary:
                    tried = [p.node for p in possible]
                    fallback = self.model.distributions(excluding=tried) or self.model.distributions()
                    step = self._choose(fallback)
                    if step.is_literal:
                        break

            self.last_steps.pop(0)

        self.last_steps.append(step)
        return step.item
