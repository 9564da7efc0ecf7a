"""Row variants and the footer synthesizer.

A listing is a flat sequence of data rows followed by zero or more synthetic
footer rows describing the load state. Footer order is fixed: Info, Error,
Loading.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from document_browser.model import Document, LoadResult


class FooterKind(Enum):
    LOADING = "loading"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class DataRow:
    index: int
    document: Document


@dataclass(frozen=True)
class FooterRow:
    kind: FooterKind
    message: str | None = None


Row = DataRow | FooterRow


def synthesize_footers(result: LoadResult) -> tuple[FooterRow, ...]:
    footers: list[FooterRow] = []
    if result.info_message is not None:
        footers.append(FooterRow(FooterKind.INFO, result.info_message))
    if result.error_message is not None:
        footers.append(FooterRow(FooterKind.ERROR, result.error_message))
    if result.is_loading:
        footers.append(FooterRow(FooterKind.LOADING))
    return tuple(footers)
