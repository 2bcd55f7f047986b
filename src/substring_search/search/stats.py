"""Point-in-time statistics for a substring index."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IndexStats:
    """Snapshot of registry and postings sizes."""

    active_documents: int
    removed_documents: int
    distinct_tokens: int
    postings: int

    @property
    def known_documents(self) -> int:
        return self.active_documents + self.removed_documents

    @property
    def average_postings_per_document(self) -> float:
        if self.active_documents == 0:
            return 0.0
        return self.postings / self.active_documents
