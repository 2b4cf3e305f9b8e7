"""
Prometheus Metrics for Git provider API access

Counters and histograms recorded by the transport layer. Labels are the
service name (e.g. "GitLab API") so that multiple accounts on the same
provider aggregate together.
"""

from importlib.metadata import version as get_version

from prometheus_client import Counter, Gauge, Histogram, Info


# =============================================================================
# Application Info Metrics
# =============================================================================

try:
    APP_VERSION = get_version("git-accounts")
except Exception:
    APP_VERSION = "unknown"

app_info = Info("git_accounts", "Git provider access layer information")
app_info.info({"version": APP_VERSION})

# =============================================================================
# External API Metrics
# =============================================================================

external_api_requests_total = Counter(
    "git_accounts_external_api_requests_total",
    "Total Git provider API requests by service",
    ["service"],
)

external_api_errors_total = Counter(
    "git_accounts_external_api_errors_total",
    "Total Git provider API transport errors by service",
    ["service"],
)

external_api_cancelled_total = Counter(
    "git_accounts_external_api_cancelled_total",
    "Total Git provider API requests cancelled before completion",
    ["service"],
)

external_api_duration_seconds = Histogram(
    "git_accounts_external_api_duration_seconds",
    "Git provider API request duration in seconds",
    ["service"],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)

external_api_requests_in_flight = Gauge(
    "git_accounts_external_api_requests_in_flight",
    "Git provider API requests currently in flight",
    ["service"],
)

external_api_responses_total = Counter(
    "git_accounts_external_api_responses_total",
    "Git provider API responses by service and status class",
    ["service", "status_class"],
)
