"""Prometheus metrics for aggregation throughput, failures, and window maintenance"""

from prometheus_client import Counter, Histogram

# Aggregation metrics
transactions_counter = Counter(
    "economy_transactions_total",
    "Transactions handed to the aggregation engine",
    ["outcome"],  # committed | rolled_back
)

transaction_failure_counter = Counter(
    "economy_transaction_failures_total",
    "Transactions rolled back, by error type",
    ["error"],
)

transaction_duration_histogram = Histogram(
    "economy_transaction_processing_seconds",
    "Time to apply and commit all aggregate updates for one transaction",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Balance metrics
balance_seed_counter = Counter(
    "economy_balance_seeds_total",
    "Daily group balance rows created from the prior transfer net",
)

balance_seed_conflict_counter = Counter(
    "economy_balance_seed_conflicts_total",
    "Seeded balance inserts that lost a race and were retried as updates",
)

# Recent activity metrics
recent_activity_eviction_counter = Counter(
    "economy_recent_activity_evictions_total",
    "Entries evicted from per-account recent-activity windows",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(committed: bool, duration_seconds: float, error: str | None = None) -> None:
    """Record processing outcome and latency for one transaction"""
    outcome = "committed" if committed else "rolled_back"
    transactions_counter.labels(outcome=outcome).inc()
    transaction_duration_histogram.observe(duration_seconds)

    if not committed:
        transaction_failure_counter.labels(error=error or "unknown").inc()
