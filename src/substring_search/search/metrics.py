"""Operation metrics for a single search utility instance."""

from collections import defaultdict, deque
from dataclasses import dataclass


@dataclass
class SearchMetrics:
    """Search operation metrics."""

    latency_ms: float
    result_count: int
    query_tokens: int
    empty_query: bool = False


class MetricsCollector:
    """Lightweight metrics collector for index and search operations.

    Counters accumulate for the lifetime of the collector; per-search samples
    are kept in a bounded window.
    """

    def __init__(self, window_size: int = 1000):
        self.window_size = window_size
        self._metrics = deque(maxlen=window_size)
        self._counters = defaultdict(int)

    def increment(self, counter: str, amount: int = 1):
        self._counters[counter] += amount

    def counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def record_search(self, metrics: SearchMetrics):
        """Record search operation metrics."""
        self._metrics.append(metrics)
        self._counters["total_searches"] += 1

        if metrics.empty_query:
            self._counters["empty_queries"] += 1
        if metrics.result_count == 0:
            self._counters["empty_results"] += 1

    def get_stats(self) -> dict:
        """Get current statistics. Latency and result figures cover the window only."""
        stats: dict = {"counters": dict(self._counters)}
        if not self._metrics:
            return stats

        latencies = sorted(m.latency_ms for m in self._metrics)
        result_counts = [m.result_count for m in self._metrics]

        stats.update(
            {
                "count": len(self._metrics),
                "latency": {
                    "mean": sum(latencies) / len(latencies),
                    "p95": latencies[int(len(latencies) * 0.95)],
                    "p99": latencies[int(len(latencies) * 0.99)],
                    "max": latencies[-1],
                },
                "results": {
                    "mean": sum(result_counts) / len(result_counts),
                    "empty_rate": self._counters.get("empty_results", 0) / self._counters["total_searches"],
                },
            }
        )
        return stats

    def reset(self):
        """Reset all metrics."""
        self._metrics.clear()
        self._counters.clear()
