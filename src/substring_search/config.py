"""Configuration for the substring search utility using Pydantic.

The model is passed to ``SearchUtility`` explicitly; nothing is read from the
environment. Invalid values fail at construction time.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class SearchConfig(BaseModel):
    """Behavioural policies for indexing and querying."""

    model_config = {"extra": "forbid", "frozen": True}

    reindex_policy: Annotated[
        Literal["replace", "accumulate"],
        Field(
            description=(
                "What indexing an already indexed uid does: 'replace' clears the postings of its previous "
                "text first, 'accumulate' keeps them and adds the new ones"
            ),
        ),
    ] = "replace"

    include_removed_in_empty_query: Annotated[
        bool,
        Field(description="Return removed uids from an empty query alongside active ones"),
    ] = False

    metrics_window_size: Annotated[
        int,
        Field(ge=1, description="Number of recent searches kept for latency and result statistics"),
    ] = 1000
