"""Synchronous in-memory substring search.

``SearchUtility`` owns the text pipeline (sanitize -> tokenize -> expand),
the inverted index, and the registry of every uid it has seen. Queries match
a document when each query word is a substring of one of its indexed words,
case-insensitively. Because indexing stores every substring of every token,
query words are looked up directly without any expansion of their own.

Example:
    >>> utility = SearchUtility[int]()
    >>> _ = utility.index_document(1, "hello world").index_document(2, "hello there")
    >>> sorted(utility.search("ell"))
    [1, 2]
    >>> utility.search("wor")
    [1]
"""

from __future__ import annotations

from collections.abc import Hashable
import logging
import time
from typing import Any, Generic, TypeVar

from substring_search.config import SearchConfig
from substring_search.observability.tracing import create_span
from substring_search.search.analyzers import WhitespaceTokenizer, expand, sanitize
from substring_search.search.inverted_index import InvertedIndex
from substring_search.search.metrics import MetricsCollector, SearchMetrics
from substring_search.search.stats import IndexStats


logger = logging.getLogger(__name__)

UidT = TypeVar("UidT", bound=Hashable)


def _coerce_text(text: Any) -> str:
    if text is None:
        return ""
    if isinstance(text, str):
        return text
    if isinstance(text, (bytes, bytearray)):
        # Undecodable bytes become lone surrogates and are skipped at expansion
        return bytes(text).decode("utf-8", errors="surrogateescape")
    return str(text)


class SearchUtility(Generic[UidT]):
    """Full-text substring search over caller-identified documents.

    Not thread-safe: callers sharing an instance across threads must
    serialize access themselves.
    """

    def __init__(self, config: SearchConfig | None = None) -> None:
        self.config = config or SearchConfig()
        self.metrics = MetricsCollector(window_size=self.config.metrics_window_size)
        self._index: InvertedIndex[UidT] = InvertedIndex()
        # uid -> active flag; entries are never deleted
        self._registry: dict[UidT, bool] = {}
        self._tokenizer = WhitespaceTokenizer()

    def index_document(self, uid: UidT, text: Any) -> SearchUtility[UidT]:
        """Add or update ``uid`` and associate it with ``text``.

        With the ``replace`` policy the postings of any previously indexed
        text for ``uid`` are dropped first; with ``accumulate`` they are kept.
        """
        with create_span("substring_search.index_document") as span:
            if uid in self._registry and self.config.reindex_policy == "replace":
                self._index.remove_document(uid)
            self._registry[uid] = True

            tokens = self.tokenize(self.sanitize(_coerce_text(text)))
            expanded = 0
            for token in tokens:
                for substring in self.expand_token(token):
                    self._index.index_document(substring, uid)
                    expanded += 1

            span.set_attribute("search.tokens", len(tokens))
            span.set_attribute("search.expanded_tokens", expanded)
            self.metrics.increment("documents_indexed")
            logger.debug("Indexed document %r: %d tokens, %d expanded", uid, len(tokens), expanded)
        return self

    def remove_document(self, uid: UidT) -> SearchUtility[UidT]:
        """Remove ``uid`` from the index. Unknown or already removed uids are ignored.

        The uid stays in the registry as inactive.
        """
        if not self._registry.get(uid):
            return self

        with create_span("substring_search.remove_document") as span:
            touched = self._index.remove_document(uid)
            self._registry[uid] = False
            span.set_attribute("search.tokens_removed", touched)
            self.metrics.increment("documents_removed")
            logger.debug("Removed document %r from %d index keys", uid, touched)
        return self

    def search(self, query: Any) -> list[UidT]:
        """Return uids whose text contains every word of ``query`` as a substring.

        An empty (or whitespace-only) query returns every known active uid,
        plus removed ones when ``include_removed_in_empty_query`` is set.
        Result order is not significant.
        """
        started = time.perf_counter()
        with create_span("substring_search.search") as span:
            words = self.tokenize(self.sanitize(_coerce_text(query)))
            if words:
                results = self._index.search(words)
            else:
                results = self._known_uids()

            span.set_attribute("search.query_tokens", len(words))
            span.set_attribute("search.result_count", len(results))

        self.metrics.record_search(
            SearchMetrics(
                latency_ms=(time.perf_counter() - started) * 1000,
                result_count=len(results),
                query_tokens=len(words),
                empty_query=not words,
            )
        )
        return results

    def sanitize(self, text: str) -> str:
        return sanitize(text)

    def tokenize(self, text: str) -> list[str]:
        return self._tokenizer(text)

    def expand_token(self, token: str) -> list[str]:
        """Return every contiguous substring of ``token``.

        A token that cannot be expanded is logged and skipped (empty list);
        indexing of the remaining tokens carries on.
        """
        expansion = expand(token)
        if not expansion.ok:
            self.metrics.increment("skipped_tokens")
            logger.warning("Unable to expand token %r: %s", token, expansion.error)
            return []
        return list(expansion.substrings)

    def stats(self) -> IndexStats:
        active = sum(1 for is_active in self._registry.values() if is_active)
        return IndexStats(
            active_documents=active,
            removed_documents=len(self._registry) - active,
            distinct_tokens=self._index.token_count,
            postings=self._index.posting_count,
        )

    def _known_uids(self) -> list[UidT]:
        if self.config.include_removed_in_empty_query:
            return list(self._registry)
        return [uid for uid, is_active in self._registry.items() if is_active]

    def __contains__(self, uid: object) -> bool:
        return bool(self._registry.get(uid))  # type: ignore[call-overload]

    def __len__(self) -> int:
        return sum(1 for is_active in self._registry.values() if is_active)
