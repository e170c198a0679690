"""Exception types raised by ngram_tally.

Missing data is never an error: queries for prefixes that were never
observed return empty lists. The classes below cover the cases that are.
"""

from __future__ import annotations


class TallyError(Exception):
    """Base class for all ngram_tally errors."""


class ConfigurationError(TallyError, ValueError):
    """A model, walker or config was constructed with invalid settings."""


class PreconditionError(TallyError, ValueError):
    """A tree or sampling helper was called with arguments it cannot accept."""


class StoreError(TallyError):
    """A storage backend failed while reading or writing counts."""


class MissingRecordError(TallyError, KeyError):
    """A flat record references a child id that is not in the record set."""

    def __init__(self, record_id: str, parent_id: str | None = None):
        self.record_id = record_id
        self.parent_id = parent_id
        where = f" (child of {parent_id})" if parent_id else ""
        super().__init__(f"No flat record with id {record_id!r}{where}")

    def __str__(self) -> str:
        return self.args[0]
