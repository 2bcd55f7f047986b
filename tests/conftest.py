"""Shared test fixtures and configuration."""

from pathlib import Path
import sys

import pytest


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from substring_search import SearchConfig, SearchUtility


@pytest.fixture
def utility():
    """Fresh utility with default policies."""
    return SearchUtility()


@pytest.fixture
def accumulate_utility():
    """Utility that keeps postings from earlier text when a uid is re-indexed."""
    return SearchUtility(SearchConfig(reindex_policy="accumulate"))
