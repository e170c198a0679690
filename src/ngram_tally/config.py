"""
Configuration Module

Settings shared by the command line tools and scripts: the shape of the
model, how walks are generated and how saved models are loaded.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional

from .errors import ConfigurationError
from .nodes import NgramOrder, SequenceKind
from .walker import WalkMode

SEQUENCE_KINDS = {
    "continuous": SequenceKind.CONTINUOUS,
    "discrete": SequenceKind.DISCRETE,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TallyConfig:
    """
    Configuration for building and walking frequency models.

    Attributes:
        ngram_size: Largest n-gram counted (>= 2)
        sequence_kind: "continuous" or "discrete"
        walk_mode: "markov_chain", "match_model" or "fixed_steps"
        walk_steps: Context length for the "fixed_steps" walk mode
        seed: Seed for the walker's random source, None for fresh entropy
        fill_size: Items requested per generated sequence
        suggestion_limit: Number of next-word suggestions
        strict_import: Fail on flat records with missing children
        log_level: Logging level name for the command line tools
    """

    ngram_size: int = 2
    sequence_kind: str = "continuous"
    walk_mode: str = "match_model"
    walk_steps: Optional[int] = None
    seed: Optional[int] = None
    fill_size: int = 10
    suggestion_limit: int = 3
    strict_import: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError for settings that can't build a model."""
        NgramOrder(self.ngram_size)
        if self.sequence_kind not in SEQUENCE_KINDS:
            raise ConfigurationError(
                f"sequence_kind must be one of {sorted(SEQUENCE_KINDS)}, got {self.sequence_kind!r}"
            )
        WalkMode.from_name(self.walk_mode, self.walk_steps)
        if self.fill_size < 0:
            raise ConfigurationError("fill_size can not be negative")
        if self.suggestion_limit < 1:
            raise ConfigurationError("suggestion_limit must be >= 1")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level!r}")

    @property
    def order(self) -> NgramOrder:
        return NgramOrder(self.ngram_size)

    @property
    def kind(self) -> SequenceKind:
        return SEQUENCE_KINDS[self.sequence_kind]

    @property
    def walk(self) -> WalkMode:
        return WalkMode.from_name(self.walk_mode, self.walk_steps)

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'TallyConfig':
        """Create a config from a dictionary, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config_dict.items() if k in names})

    def to_dict(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
