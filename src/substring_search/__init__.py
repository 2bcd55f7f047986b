from substring_search.config import SearchConfig
from substring_search.search.analyzers import Expansion
from substring_search.search.inverted_index import InvertedIndex
from substring_search.search.stats import IndexStats
from substring_search.search.search_utility import SearchUtility


__all__ = [
    "Expansion",
    "IndexStats",
    "InvertedIndex",
    "SearchConfig",
    "SearchUtility",
]
