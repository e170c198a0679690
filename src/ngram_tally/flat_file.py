"""
File encodings for flat models.

JSON keeps the whole model in one document using the flat key names.
CSV writes one row per record through pandas, with settings and root
child ids in a `.meta.json` file beside it.

Literal items are stored as text, so these encodings round-trip models
of str items.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Union

import pandas as pd

from .bridge import NGRAM_SIZE_KEY, ROOT_CHILD_IDS_KEY, SEQUENCE_KIND_KEY, FlatModel
from .errors import StoreError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save_json(flat: FlatModel, path: PathLike) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(flat.to_dict(), f, ensure_ascii=False, indent=1)
    except OSError as e:
        raise StoreError(f"Could not write {path}: {e}") from e

    logger.info(f"Saved {len(flat)} records to {path}")
    return path


def load_json(path: PathLike) -> FlatModel:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            values = json.load(f)
        flat = FlatModel.from_dict(values)
    except OSError as e:
        raise StoreError(f"Could not read {path}: {e}") from e
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Malformed model file {path}: {e}") from e

    logger.info(f"Loaded {len(flat)} records from {path}")
    return flat


def meta_path(path: PathLike) -> Path:
    path = Path(path)
    return path.with_name(path.stem + ".meta.json")


def save_csv(flat: FlatModel, path: PathLike) -> Path:
    path = Path(path)
    meta = {
        SEQUENCE_KIND_KEY: flat.sequence_kind.value,
        NGRAM_SIZE_KEY: flat.order.size,
        ROOT_CHILD_IDS_KEY: list(flat.root_child_ids),
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        flat.to_frame().to_csv(path, index=False)
        with open(meta_path(path), "w", encoding="utf-8") as f:
            json.dump(meta, f, indent=1)
    except OSError as e:
        raise StoreError(f"Could not write {path}: {e}") from e

    logger.info(f"Saved {len(flat)} records to {path}")
    return path


def load_csv(path: PathLike) -> FlatModel:
    path = Path(path)
    try:
        with open(meta_path(path), "r", encoding="utf-8") as f:
            meta = json.load(f)
        frame = pd.read_csv(path, dtype={"id": str, "node": str, "child_ids": str},
                            keep_default_na=False)
        flat = FlatModel.from_frame(
            frame,
            sequence_kind=meta[SEQUENCE_KIND_KEY],
            order=int(meta[NGRAM_SIZE_KEY]),
            root_child_ids=meta[ROOT_CHILD_IDS_KEY],
        )
    except OSError as e:
        raise StoreError(f"Could not read {path}: {e}") from e
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Malformed model file {path}: {e}") from e

    logger.info(f"Loaded {len(flat)} records from {path}")
    return flat
