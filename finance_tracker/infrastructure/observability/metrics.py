"""Prometheus metrics for debt generation, recurrences and installment settlement"""

from prometheus_client import Counter, Histogram

# Generation metrics
debts_created_counter = Counter(
    "finance_debts_created_total",
    "Total debts created",
    ["frequency"],
)

installments_generated_counter = Counter(
    "finance_installments_generated_total",
    "Installments generated for new debts",
)

occurrences_generated_counter = Counter(
    "finance_occurrences_generated_total",
    "Revenue/expense occurrences generated",
    ["kind"],  # revenue | expense
)

# Settlement metrics
installment_status_counter = Counter(
    "finance_installment_status_changes_total",
    "Installment status transitions",
    ["status"],  # PAID | PENDING
)

debt_status_flip_counter = Counter(
    "finance_debt_status_flips_total",
    "Debt status changes caused by installment updates",
    ["status"],  # ACTIVE | FINISHED
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_debt_created(frequency: str, installments_count: int) -> None:
    """Record a new debt and the size of its schedule"""
    debts_created_counter.labels(frequency=frequency).inc()
    installments_generated_counter.inc(installments_count)


def record_installment_status(status: str, previous_debt_status: str, debt_status: str) -> None:
    """Record an installment transition and any resulting debt flip"""
    installment_status_counter.labels(status=status).inc()
    if previous_debt_status != debt_status:
        debt_status_flip_counter.labels(status=debt_status).inc()
