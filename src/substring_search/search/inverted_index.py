"""Postings store mapping index keys to the documents that contain them."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable, Sequence
from typing import Generic, TypeVar


UidT = TypeVar("UidT", bound=Hashable)


class InvertedIndex(Generic[UidT]):
    """In-memory inverted index: token -> set of uids.

    A reverse map (uid -> tokens) keeps removal proportional to the size of
    the removed document instead of the whole vocabulary.
    """

    def __init__(self) -> None:
        self._postings: defaultdict[str, set[UidT]] = defaultdict(set)
        self._doc_tokens: defaultdict[UidT, set[str]] = defaultdict(set)

    def index_document(self, token: str, uid: UidT) -> None:
        """Add ``uid`` to the postings of ``token``."""
        self._postings[token].add(uid)
        self._doc_tokens[uid].add(token)

    def remove_document(self, uid: UidT) -> int:
        """Drop ``uid`` from every postings set. Returns the number of tokens touched."""
        tokens = self._doc_tokens.pop(uid, None)
        if not tokens:
            return 0

        for token in tokens:
            postings = self._postings.get(token)
            if postings is None:
                continue
            postings.discard(uid)
            if not postings:
                del self._postings[token]
        return len(tokens)

    def search(self, tokens: Sequence[str]) -> list[UidT]:
        """Return uids present in the postings of every token."""
        if not tokens:
            return []

        candidates: list[set[UidT]] = []
        for token in tokens:
            postings = self._postings.get(token)
            if not postings:
                return []
            candidates.append(postings)

        # Intersect smallest first so the working set only shrinks
        candidates.sort(key=len)
        matches = set(candidates[0])
        for postings in candidates[1:]:
            matches &= postings
            if not matches:
                break
        return list(matches)

    def postings_for(self, token: str) -> frozenset[UidT]:
        return frozenset(self._postings.get(token, ()))

    def tokens_for(self, uid: UidT) -> frozenset[str]:
        return frozenset(self._doc_tokens.get(uid, ()))

    @property
    def token_count(self) -> int:
        """Distinct keys with at least one posting."""
        return len(self._postings)

    @property
    def posting_count(self) -> int:
        """Total (token, uid) pairs stored."""
        return sum(len(postings) for postings in self._postings.values())

    def __contains__(self, token: object) -> bool:
        return token in self._postings
