"""Prometheus metrics for the catalog, dispatch and API layers."""

from prometheus_client import Counter, Gauge

# Catalog metrics
CATALOG_UPDATES = Counter(
    "glooscap_catalog_updates_total",
    "Total number of catalog scan merges",
    ["target"],
)

CATALOG_PAGES = Gauge(
    "glooscap_catalog_pages",
    "Number of pages currently owned by a target",
    ["target"],
)

CATALOG_NOTIFICATIONS_DROPPED = Counter(
    "glooscap_catalog_notifications_dropped_total",
    "Change notifications coalesced into an already pending signal",
)

# Job registry metrics
JOB_STATUS_UPDATES = Counter(
    "glooscap_job_status_updates_total",
    "Total number of job status snapshots recorded",
    ["state"],
)

# Dispatch metrics
DISPATCH_TOTAL = Counter(
    "glooscap_dispatch_total",
    "Total number of dispatch attempts",
    ["mode", "status"],  # status: success, error
)

# HTTP metrics
REQUESTS_TOTAL = Counter(
    "glooscap_http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "path"],
)

RESPONSES_TOTAL = Counter(
    "glooscap_http_responses_total",
    "Total number of HTTP responses",
    labelnames=["status_code"],
)
