"""Prometheus metrics for the card ledger service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- cardledger_postings_total: Ledger postings by type and outcome
- cardledger_card_payments_total: Credit-card payments by kind
- cardledger_statements_total: Statement job results by outcome
- cardledger_snapshots_total: Balance snapshots written

Technical Metrics (for Engineering/SRE):
- cardledger_posting_latency_seconds: Ledger posting latency
- cardledger_job_duration_seconds: Batch job duration by job
- cardledger_category_lookup_failures_total: Category lookup failures
- cardledger_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

postings_total = Counter(
    "cardledger_postings_total",
    "Total number of ledger postings",
    ["type", "outcome"],  # outcome: posted, rejected
)

card_payments_total = Counter(
    "cardledger_card_payments_total",
    "Total number of credit-card payments",
    ["kind"],  # statement, msi, installment, revert
)

statements_total = Counter(
    "cardledger_statements_total",
    "Statement generation results",
    ["outcome"],  # generated, skipped, failed, overdue
)

snapshots_total = Counter(
    "cardledger_snapshots_total",
    "Account balance snapshots",
    ["outcome"],  # created, skipped, error
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

posting_latency = Histogram(
    "cardledger_posting_latency_seconds",
    "Ledger posting latency in seconds",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

job_duration = Histogram(
    "cardledger_job_duration_seconds",
    "Batch job duration in seconds",
    ["job"],
    buckets=[0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0],
)

category_lookup_failures = Counter(
    "cardledger_category_lookup_failures_total",
    "Total number of category lookup failures",
    ["error_type"],  # timeout, error, not_found
)

http_requests_total = Counter(
    "cardledger_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "cardledger_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_posting(transaction_type: str, posted: bool) -> None:
    """Record a ledger posting attempt."""
    outcome = "posted" if posted else "rejected"
    postings_total.labels(type=transaction_type, outcome=outcome).inc()


def record_card_payment(kind: str) -> None:
    """Record a credit-card payment or reversal."""
    card_payments_total.labels(kind=kind).inc()


def record_statement(outcome: str) -> None:
    """Record the outcome of generating one account's statement."""
    statements_total.labels(outcome=outcome).inc()


def record_snapshot(outcome: str) -> None:
    """Record the outcome of snapshotting one account."""
    snapshots_total.labels(outcome=outcome).inc()


def record_category_lookup_failure(error_type: str) -> None:
    category_lookup_failures.labels(error_type=error_type).inc()


@contextmanager
def track_posting_latency() -> Generator[None, None, None]:
    """Context manager to track ledger posting latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        posting_latency.observe(duration)


@contextmanager
def track_job_duration(job: str) -> Generator[None, None, None]:
    """Context manager to track a batch job run."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        job_duration.labels(job=job).observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
