"""
Latency statistics over per-case search durations.
"""

import math
from typing import List, Sequence


def percentile(values: Sequence[float], pct: float) -> float:
    """Floor-indexed percentile of `values`; 0 for an empty sequence.

    The index is floor((n - 1) * pct), so on small samples p95 resolves to a
    low-ranked sample (with two samples it is the smaller one).
    """
    if len(values) == 0:
        return 0.0
    ordered = sorted(values)
    idx = math.floor((len(ordered) - 1) * pct)
    return ordered[idx]


class TimingCollector:
    """Records elapsed time of each search call; setup and cleanup are never recorded here."""

    def __init__(self):
        self._samples: List[float] = []

    def record(self, elapsed_ms: float) -> None:
        self._samples.append(elapsed_ms)

    @property
    def samples(self) -> List[float]:
        return list(self._samples)

    @property
    def count(self) -> int:
        return len(self._samples)

    @property
    def total_ms(self) -> float:
        return sum(self._samples)

    @property
    def avg_ms(self) -> float:
        return self.total_ms / max(1, self.count)

    @property
    def p95_ms(self) -> float:
        return percentile(self._samples, 0.95)

    @property
    def qps(self) -> float:
        """Cases per second over summed search time."""
        total_ms = self.total_ms
        if total_ms == 0:
            return 0.0
        return (self.count / total_ms) * 1000
