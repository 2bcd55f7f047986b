"""Text analysis for the substring index.

Three steps turn raw text into index keys:

- ``sanitize`` trims surrounding whitespace and lowercases the text
- ``WhitespaceTokenizer`` splits on whitespace runs and drops empty tokens
- ``expand`` emits every contiguous substring of a token

Expansion is what makes an exact-key inverted index answer substring
queries: a token of length n produces n(n+1)/2 keys, so index size grows
quadratically with token length while lookups stay a single dict hit.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


def sanitize(text: str) -> str:
    """Strip surrounding whitespace and lowercase."""
    return text.strip().lower()


class WhitespaceTokenizer:
    """Splits text on runs of whitespace, never yielding empty tokens."""

    def __call__(self, text: str) -> list[str]:
        return text.split()


@dataclass(frozen=True)
class Expansion:
    """Outcome of expanding one token.

    ``error`` is set when the token could not be expanded; ``substrings`` is
    then empty and the caller decides how to report the skip.
    """

    token: str
    substrings: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def iter_substrings(token: str) -> Iterator[str]:
    """Yield token[i:j] for every 0 <= i < j <= len(token), duplicates included."""
    length = len(token)
    for start in range(length):
        for end in range(start + 1, length + 1):
            yield token[start:end]


def expand(token: str) -> Expansion:
    """Expand ``token`` into all of its contiguous substrings.

    Tokens holding unpaired surrogates (e.g. from undecodable input bytes)
    cannot be represented as UTF-8 and are rejected rather than indexed.
    """
    try:
        token.encode("utf-8")
    except UnicodeEncodeError as exc:
        return Expansion(token=token, error=f"{exc.reason} at position {exc.start}")
    return Expansion(token=token, substrings=tuple(iter_substrings(token)))


def substring_count(length: int) -> int:
    """Number of substrings ``expand`` emits for a token of ``length`` characters."""
    if length <= 0:
        return 0
    return length * (length + 1) // 2
