from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


class SearchMetrics:
    """Prometheus counters for filter recomputations.

    Each instance owns its registry so several engines can coexist in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.recompute_counter = Counter('querysift_recompute_total', 'Total number of filter recomputations',
                                         registry=self.registry)
        self.scanned_counter = Counter('querysift_items_scanned_total', 'Total number of items scanned',
                                       registry=self.registry)
        self.matched_counter = Counter('querysift_items_matched_total', 'Total number of items matched',
                                       registry=self.registry)
        self.short_circuit_counter = Counter('querysift_short_circuit_total',
                                             'Total number of recomputations skipped by an empty query',
                                             registry=self.registry)
        self.recompute_latency = Histogram('querysift_recompute_latency', 'Filter recomputation latency',
                                           registry=self.registry)

    def record_pass(self, scanned: int, matched: int, elapsed: float) -> None:
        self.recompute_counter.inc()
        self.scanned_counter.inc(scanned)
        self.matched_counter.inc(matched)
        self.recompute_latency.observe(elapsed)

    def record_short_circuit(self) -> None:
        self.recompute_counter.inc()
        self.short_circuit_counter.inc()

    def render(self) -> str:
        """Return the metrics in the Prometheus text exposition format."""
        return generate_latest(self.registry).decode('utf-8')
