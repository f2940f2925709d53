"""Prometheus metrics for monitoring report volume, roster health, and data store reliability"""

from prometheus_client import Counter, Histogram

from facility_gateway.domain.models import RosterCounts

# Report metrics
report_counter = Counter(
    "facility_report_total",
    "Total dashboard reports produced",
    ["report", "timeline"],  # overview | transactions
)

member_status_counter = Counter(
    "facility_member_classified_total",
    "Members classified by lifecycle status",
    ["status"],  # active | expiring | expired
)

# Data store metrics
datastore_fetch_failures_counter = Counter(
    "datastore_fetch_failures_total",
    "Failed data store calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_overview(counts: RosterCounts) -> None:
    """Record roster classification outcomes"""
    report_counter.labels(report="overview", timeline="none").inc()
    member_status_counter.labels(status="active").inc(counts.active)
    member_status_counter.labels(status="expiring").inc(counts.expiring)
    member_status_counter.labels(status="expired").inc(counts.expired)


def record_transactions_report(timeline: str) -> None:
    report_counter.labels(report="transactions", timeline=timeline).inc()
