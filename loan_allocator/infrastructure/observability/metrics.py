"""Prometheus metrics for assignment outcomes, facility refusals and run latency"""

from prometheus_client import Counter, Histogram

# Loan outcome metrics
loan_counter = Counter(
    "loan_allocator_loans_total",
    "Loans processed by the assignment engine",
    ["outcome"],  # assigned | unassigned
)

rejection_counter = Counter(
    "loan_allocator_rejections_total",
    "Facility refusals during the assignment scan",
    ["reason"],  # banned_state | default_likelihood | insufficient_capacity
)

# Run metrics
run_duration_histogram = Histogram(
    "loan_allocator_run_duration_seconds",
    "Wall time of one allocation run",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0, 120.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_loan(assigned: bool) -> None:
    """Record the final outcome of one loan"""
    outcome = "assigned" if assigned else "unassigned"
    loan_counter.labels(outcome=outcome).inc()


def record_rejection(reason: str) -> None:
    """Record one facility refusing one loan"""
    rejection_counter.labels(reason=reason).inc()
