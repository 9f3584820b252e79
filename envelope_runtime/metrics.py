from __future__ import annotations

import threading
from collections import Counter
from typing import Tuple


class MetricsCollector:
    """Small in-memory Prometheus-style metrics collector."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outcomes: Counter[str] = Counter()
        self._latency_buckets: Counter[Tuple[str, str]] = Counter()
        self._bucket_edges = (1, 5, 10, 25, 50, 100, 250, 500, 1000)

    def inc(self, outcome: str, n: int = 1) -> None:
        with self._lock:
            self._outcomes[outcome] += n

    def count(self, outcome: str) -> int:
        with self._lock:
            return self._outcomes[outcome]

    def observe_latency(self, path: str, latency_ms: float) -> None:
        bucket = self._bucket_for(latency_ms)
        with self._lock:
            self._latency_buckets[(path, bucket)] += 1

    def _bucket_for(self, latency_ms: float) -> str:
        for edge in self._bucket_edges:
            if latency_ms <= edge:
                return str(edge)
        return "+Inf"

    def render_prometheus(self) -> str:
        lines = ["# TYPE envelope_fetch_total counter"]
        with self._lock:
            outcomes = sorted(self._outcomes.items())
            buckets = sorted(self._latency_buckets.items())

        for outcome, value in outcomes:
            lines.append(f'envelope_fetch_total{{outcome="{outcome}"}} {value}')

        lines.append("# TYPE envelope_latency_ms_bucket counter")
        for (path, bucket), value in buckets:
            lines.append(f'envelope_latency_ms_bucket{{path="{path}",le="{bucket}"}} {value}')

        return "\n".join(lines) + "\n"


metrics = MetricsCollector()
