"""
Substring search package.

- analyzers: sanitizing, whitespace tokenization, all-substrings expansion
- inverted_index: token -> uid postings store
- search_utility: public index/remove/search API
- metrics, stats: per-instance counters and index size snapshots
"""
