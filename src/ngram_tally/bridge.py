"""
Flat Bridge Module

Converts between the linked counting tree of a `FrequencyModel` and a flat
set of ID-keyed records that any persistence layer can hold (a key-value
file, a table, ...). Records are regenerated in full on every export.

Usage:
    flat = export_model(model)
    restored = import_model(flat)
"""

from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

import pandas as pd

from .errors import ConfigurationError, MissingRecordError, PreconditionError
from .memory_store import MemoryNode, MemoryStore
from .model import FrequencyModel, Normalizer
from .nodes import ROOT, NgramOrder, Node, SequenceKind, node_from_text, node_to_text
from .store import CountingTreeNode, TreeStore

logger = logging.getLogger(__name__)

# Key names shared by the flat encodings.
SEQUENCE_KIND_KEY = "Model.sequenceTypeValue"
NGRAM_SIZE_KEY = "Model.ngramSize"
ROOT_CHILD_IDS_KEY = "Model.rootChildIds"
DATA_KEY = "Model.data"
TEXT_KEY = "Node.TextRepresentation"
COUNT_KEY = "Node.Count"
CHILD_IDS_KEY = "Node.ChildIds"

FRAME_COLUMNS = ["id", "node", "count", "child_ids"]


@dataclass(frozen=True)
class FlatRecord:
    """
    One tree node without its links.

    Attributes:
        id: Opaque identifier, unique within one export
        node: The n-gram element
        count: Observation count of the path ending at this node
        child_ids: Ids of the node's children, in enumeration order
    """
    id: str
    node: Node
    count: float
    child_ids: Tuple[str, ...] = ()


@dataclass
class FlatModel:
    """Everything needed to rebuild a model: settings, root child ids and records."""
    sequence_kind: SequenceKind
    order: NgramOrder
    root_child_ids: List[str] = field(default_factory=list)
    records: Dict[str, FlatRecord] = field(default_factory=dict)

    def add(self, record: FlatRecord) -> None:
        self.records[record.id] = record

    def get(self, record_id: str) -> Optional[FlatRecord]:
        return self.records.get(record_id)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> Dict:
        """
        Plain dict form. Literal items are written with `str()`, so only
        models of str items come back unchanged from `from_dict`.
        """
        data = {}
        for record in self.records.values():
            text = node_to_text(record.node)
            if text is None:
                raise PreconditionError(f"record {record.id} holds the root node")
            data[record.id] = {
                TEXT_KEY: text,
                COUNT_KEY: record.count,
                CHILD_IDS_KEY: list(record.child_ids),
            }
        return {
            SEQUENCE_KIND_KEY: self.sequence_kind.value,
            NGRAM_SIZE_KEY: self.order.size,
            ROOT_CHILD_IDS_KEY: list(self.root_child_ids),
            DATA_KEY: data,
        }

    @classmethod
    def from_dict(cls, values: Dict) -> "FlatModel":
        flat = cls(
            sequence_kind=SequenceKind(values[SEQUENCE_KIND_KEY]),
            order=NgramOrder(int(values[NGRAM_SIZE_KEY])),
            root_child_ids=list(values[ROOT_CHILD_IDS_KEY]),
        )
        for record_id, details in values[DATA_KEY].items():
            node = node_from_text(details[TEXT_KEY])
            if node is None:
                raise ConfigurationError(
                    f"record {record_id} has unknown node text {details[TEXT_KEY]!r}"
                )
            flat.add(FlatRecord(
                id=record_id,
                node=node,
                count=float(details[COUNT_KEY]),
                child_ids=tuple(details[CHILD_IDS_KEY]),
            ))
        return flat

    def to_frame(self) -> pd.DataFrame:
        """One row per record; nodes and child ids in text form."""
        rows = [
            {
                "id": record.id,
                "node": node_to_text(record.node),
                "count": record.count,
                "child_ids": " ".join(record.child_ids),
            }
            for record in self.records.values()
        ]
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, sequence_kind: SequenceKind,
                   order: NgramOrder | int, root_child_ids: List[str]) -> "FlatModel":
        missing = [c for c in FRAME_COLUMNS if c not in frame.columns]
        if missing:
            raise ConfigurationError(f"record frame is missing columns: {missing}")

        flat = cls(SequenceKind(sequence_kind), NgramOrder.coerce(order), list(root_child_ids))
        for row in frame.to_dict(orient="records"):
            node = node_from_text(str(row["node"]))
            if node is None:
                raise ConfigurationError(f"record {row['id']} has unknown node text {row['node']!r}")
            child_ids = row["child_ids"] if isinstance(row["child_ids"], str) else ""
            flat.add(FlatRecord(str(row["id"]), node, float(row["count"]), tuple(child_ids.split())))
        return flat


def _tree_root(model: FrequencyModel) -> CountingTreeNode:
    if not isinstance(model.store, TreeStore):
        raise ConfigurationError(
            f"export needs a tree backed store, got {type(model.store).__name__}"
        )
    return model.store.root


def export_model(model: FrequencyModel) -> FlatModel:
    """
    Flatten the model's counting tree, breadth first from the root's
    children. The root itself is not exported.
    """
    flat = FlatModel(model.sequence_kind, model.order)
    # id(tree node) -> (record id, tree node); holding the node keeps id() stable
    assigned: Dict[int, Tuple[str, CountingTreeNode]] = {}
    queue: deque = deque()

    def _record_id(tree_node: CountingTreeNode) -> str:
        key = id(tree_node)
        if key not in assigned:
            assigned[key] = (uuid.uuid4().hex, tree_node)
            queue.append(tree_node)
        return assigned[key][0]

    flat.root_child_ids = [_record_id(child) for child in _tree_root(model).children()]

    while queue:
        tree_node = queue.popleft()
        child_ids = tuple(_record_id(child) for child in tree_node.children())
        flat.add(FlatRecord(
            id=assigned[id(tree_node)][0],
            node=tree_node.node,
            count=tree_node.count,
            child_ids=child_ids,
        ))

    logger.debug(f"Exported {len(flat)} records")
    return flat


def import_model(flat: FlatModel, strict: bool = True,
                 normalizer: Optional[Normalizer] = None) -> FrequencyModel:
    """
    Rebuild a model, held in memory, from flat records.

    A node without children gets an end-marker child carrying its own count,
    so every leaf ends at a boundary.

    Args:
        flat: Records and settings to load
        strict: Raise `MissingRecordError` when a child id has no record.
            With False the missing subtree is skipped and a warning logged.
        normalizer: Normalizer for the rebuilt model

    Returns:
        A FrequencyModel with a MemoryStore
    """
    end_node = flat.sequence_kind.end_node
    root = MemoryNode(ROOT)

    for record_id in flat.root_child_ids:
        child = _hydrate(flat, record_id, None, end_node, strict)
        if child is not None:
            root.child_map[child.node] = child

    return FrequencyModel(flat.sequence_kind, flat.order,
                          normalizer=normalizer, store=MemoryStore(root))


def _hydrate(flat: FlatModel, record_id: str, parent_id: Optional[str],
             end_node: Node, strict: bool,
             ancestors: FrozenSet[str] = frozenset()) -> Optional[MemoryNode]:
    if record_id in ancestors:
        raise ConfigurationError(f"record {record_id} is its own ancestor")

    record = flat.get(record_id)
    if record is None:
        if strict:
            raise MissingRecordError(record_id, parent_id)
        logger.warning(f"Skipping missing record {record_id} (child of {parent_id or 'root'})")
        return None

    children: Dict[Node, MemoryNode] = {}
    for child_id in record.child_ids:
        child = _hydrate(flat, child_id, record_id, end_node, strict,
                         ancestors | {record_id})
        if child is not None:
            children[child.node] = child

    if not children:
        children[end_node] = MemoryNode(end_node, record.count)

    return MemoryNode(record.node, record.count, children)
