"""Prometheus metrics for the lifecycle engine.

Defines operational metrics for soft-delete cascades, account withdrawal and
the grace-period erasure job.
"""

from prometheus_client import Counter, Histogram, Gauge

# Cascade metrics
cascade_soft_deletes_total = Counter(
    "teamspace_cascade_soft_deletes_total",
    "Entities newly marked deleted by cascade soft-delete",
    ["entity_type"]  # entity_type: Board|Post|Comment|...
)

cascade_failures_total = Counter(
    "teamspace_cascade_failures_total",
    "Cascade soft-deletes rolled back because a node failed",
    ["entity_type"]  # entity_type of the cascade root
)

# Account lifecycle metrics
account_transitions_total = Counter(
    "teamspace_account_transitions_total",
    "Account lifecycle transitions",
    ["transition", "status"]  # transition: withdraw|restore, status: success|rejected
)

# Erasure job metrics
account_erasures_total = Counter(
    "teamspace_account_erasures_total",
    "Accounts processed by the erasure job",
    ["trigger", "status"]  # trigger: scheduled|manual, status: erased|skipped|failed
)

cleanup_duration_seconds = Histogram(
    "teamspace_account_cleanup_duration_seconds",
    "Duration of one account erasure run in seconds",
    ["trigger"],
    buckets=[0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0, 900.0]
)

accounts_pending_erasure = Gauge(
    "teamspace_accounts_pending_erasure",
    "Accounts past their permanent deletion date at the last report"
)

accounts_in_grace_period = Gauge(
    "teamspace_accounts_in_grace_period",
    "Withdrawn accounts still restorable at the last report"
)
