"""Bulk actions over checked documents (delete, share) and action visibility.

Delete failures are collected across the whole batch: every document is
attempted and at most one aggregate notification is raised.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from .logger import get_logger
from .model import Document, find_common_mime_type

_logger = get_logger("actions")


class BrowserAction(Enum):
    OPEN = "open"
    CREATE = "create"
    GET_CONTENT = "get_content"
    OPEN_TREE = "open_tree"
    MANAGE = "manage"


def visible_actions(action: BrowserAction) -> frozenset[str]:
    """Contextual actions offered for a non-empty selection."""
    if action == BrowserAction.MANAGE:
        return frozenset({"share", "delete"})
    return frozenset({"open"})


@dataclass
class DeleteOutcome:
    deleted: list[Document] = field(default_factory=list)
    failed: list[Document] = field(default_factory=list)

    @property
    def had_trouble(self) -> bool:
        return bool(self.failed)


def delete_documents(
    docs: Iterable[Document],
    deleter: Callable[[Document], bool],
    notify_failure: Callable[[list[Document]], None] | None = None,
) -> DeleteOutcome:
    outcome = DeleteOutcome()

    for doc in docs:
        if not doc.is_delete_supported:
            _logger.warning("skipping delete (unsupported): %s", doc.id)
            outcome.failed.append(doc)
            continue
        try:
            ok = bool(deleter(doc))
        except Exception as exc:
            _logger.warning("delete failed for %s: %s", doc.id, exc)
            ok = False
        else:
            if not ok:
                _logger.warning("delete rejected for %s", doc.id)
        (outcome.deleted if ok else outcome.failed).append(doc)

    _logger.debug("delete complete: %d success, %d failed", len(outcome.deleted), len(outcome.failed))
    if outcome.had_trouble and notify_failure is not None:
        notify_failure(list(outcome.failed))
    return outcome


@dataclass(frozen=True)
class ShareRequest:
    mime_type: str
    uris: tuple[str, ...]

    @property
    def multiple(self) -> bool:
        return len(self.uris) > 1


def build_share_request(docs: list[Document]) -> ShareRequest | None:
    if not docs:
        return None
    if len(docs) == 1:
        return ShareRequest(docs[0].mime_type, (docs[0].id.uri,))
    return ShareRequest(
        find_common_mime_type([d.mime_type for d in docs]),
        tuple(d.id.uri for d in docs),
    )
