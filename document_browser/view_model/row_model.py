from __future__ import annotations

from document_browser.errors import RowIndexError
from document_browser.model import Document, LoadResult

from .footers import DataRow, FooterRow, Row, synthesize_footers


class RowModel:
    """Index-addressable rows for one LoadResult.

    Built once per result and never mutated afterwards; a new result produces a
    new RowModel.
    """

    __slots__ = ("_document_count", "_footers", "_rows")

    def __init__(self, documents: tuple[Document, ...] = (), footers: tuple[FooterRow, ...] = ()) -> None:
        self._document_count = len(documents)
        self._footers = footers
        self._rows: tuple[Row, ...] = tuple(DataRow(i, d) for i, d in enumerate(documents)) + footers

    @classmethod
    def rebuild(cls, result: LoadResult) -> RowModel:
        return cls(tuple(result.documents), synthesize_footers(result))

    @classmethod
    def empty(cls) -> RowModel:
        return cls()

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def document_count(self) -> int:
        return self._document_count

    @property
    def footer_count(self) -> int:
        return len(self._footers)

    @property
    def footers(self) -> tuple[FooterRow, ...]:
        return self._footers

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(r.document for r in self._rows[: self._document_count])  # type: ignore[union-attr]

    @property
    def is_empty(self) -> bool:
        """Whether the empty placeholder should be shown (no documents, no footers)."""
        return not self._rows

    def get(self, position: int) -> Row:
        if not (0 <= position < len(self._rows)):
            raise RowIndexError(position, len(self._rows))
        return self._rows[position]

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"RowModel(documents={self._document_count}, footers={[f.kind.value for f in self._footers]})"
