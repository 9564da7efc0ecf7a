"""Exception hierarchy.

Only internal-consistency faults propagate out of the view-model. Query,
thumbnail and persistence failures are translated (footer state, static icon,
log line) where they happen.
"""

from __future__ import annotations


class DocumentBrowserError(Exception):
    """Base class for document_browser errors."""


class InternalConsistencyError(DocumentBrowserError, RuntimeError):
    """A programming error: unknown mode, unknown footer kind, bad row index."""


class RowIndexError(InternalConsistencyError, IndexError):
    def __init__(self, position: int, row_count: int) -> None:
        super().__init__(f"row {position} out of range (row_count={row_count})")
        self.position = position
        self.row_count = row_count


class QueryError(DocumentBrowserError):
    """A directory query source could not produce a result."""
