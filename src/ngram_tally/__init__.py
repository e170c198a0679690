"""
ngram_tally: n-gram frequency models and random-walk sequence generation.

1. Node model: literal items and sequence-boundary markers
2. Counting tree contract with the shared increment and probability algorithms
3. FrequencyModel: observes sequences and answers probability queries
4. Flat bridge: exports a model to ID-keyed records and rebuilds it
5. Walker: generates sequences by weighted random walks

Usage:
    model = FrequencyModel(SequenceKind.CONTINUOUS, order=2)
    model.observe_sequence(["🌧", "🌧", "☀️", "☀️"])
    Walker(model, rng=1).fill(5)
"""

__version__ = "1.0.0"

from .errors import (
    ConfigurationError,
    MissingRecordError,
    PreconditionError,
    StoreError,
    TallyError,
)
from .nodes import (
    ROOT,
    SEQUENCE_END,
    SEQUENCE_START,
    UNSEEN_LEADING,
    UNSEEN_TRAILING,
    NgramOrder,
    Node,
    NodeKind,
    SequenceKind,
)
from .store import CountingTreeNode, ItemProbability, TallyStore, TreeStore
from .memory_store import MemoryNode, MemoryStore
from .model import FrequencyModel
from .bridge import FlatModel, FlatRecord, export_model, import_model
from .walker import WalkMode, Walker, weighted_choice
from .config import TallyConfig
from .predictive import PredictiveText

__all__ = [
    'TallyError',
    'ConfigurationError',
    'PreconditionError',
    'StoreError',
    'MissingRecordError',
    'Node',
    'NodeKind',
    'ROOT',
    'SEQUENCE_START',
    'SEQUENCE_END',
    'UNSEEN_LEADING',
    'UNSEEN_TRAILING',
    'NgramOrder',
    'SequenceKind',
    'CountingTreeNode',
    'ItemProbability',
    'TallyStore',
    'TreeStore',
    'MemoryNode',
    'MemoryStore',
    'FrequencyModel',
    'FlatModel',
    'FlatRecord',
    'export_model',
    'import_model',
    'WalkMode',
    'Walker',
    'weighted_choice',
    'TallyConfig',
    'PredictiveText',
]
