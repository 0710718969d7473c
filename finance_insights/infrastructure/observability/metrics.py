"""Prometheus metrics for monitoring analysis runs, health outcomes and record fetches"""

from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_counter = Counter(
    "finance_insights_analysis_total",
    "Total analysis runs",
    ["outcome"],  # published | superseded | failed
)

health_status_counter = Counter(
    "finance_insights_health_status",
    "Health score status labels produced",
    ["status"],
)

anomaly_count_histogram = Histogram(
    "finance_insights_anomalies_per_run",
    "Unusual transactions flagged per analysis run",
    buckets=[0, 1, 2, 5, 10, 25],
)

# Record store metrics
record_fetch_failures_counter = Counter(
    "record_fetch_failures_total",
    "Failed record store calls",
    ["collection"],  # transactions | incomes
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(outcome: str, health_status: str | None = None, anomaly_count: int | None = None) -> None:
    """Record one analysis run for monitoring outcomes and health distribution"""
    analysis_counter.labels(outcome=outcome).inc()

    if health_status is not None:
        health_status_counter.labels(status=health_status).inc()

    if anomaly_count is not None:
        anomaly_count_histogram.observe(anomaly_count)
