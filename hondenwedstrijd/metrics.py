"""Prometheus metrics for the competition calendar.

All custom metrics use the 'hondenwedstrijd_' prefix to avoid conflicts
with other applications in a shared observability stack.
"""

from prometheus_client import Counter, Gauge, Histogram, Info

APP_INFO = Info(
    "hondenwedstrijd_app",
    "Hondenwedstrijd application info"
)
APP_INFO.info({"version": "1.0.0", "name": "hondenwedstrijd"})

# Fetching
ENDPOINT_FETCH_TOTAL = Counter(
    "hondenwedstrijd_endpoint_fetch_total",
    "Endpoint fetch outcomes",
    ["endpoint", "outcome"],  # ok, empty, transport, status, decode
)

# Extraction
STRATEGY_CANDIDATES_TOTAL = Counter(
    "hondenwedstrijd_strategy_candidates_total",
    "Candidates produced per markup strategy",
    ["strategy"],  # table, list, free_text
)

CANDIDATES_REJECTED_TOTAL = Counter(
    "hondenwedstrijd_candidates_rejected_total",
    "Candidates rejected during finalisation",
    ["reason"],  # date, empty, invalid
)

# Refresh cycles
REFRESH_DURATION_SECONDS = Histogram(
    "hondenwedstrijd_refresh_duration_seconds",
    "Duration of a full extraction cycle in seconds",
    buckets=[1, 2, 5, 10, 30, 60, 120],
)

REFRESH_TOTAL = Counter(
    "hondenwedstrijd_refresh_total",
    "Extraction cycles by outcome",
    ["outcome"],  # completed, no_data, cancelled
)

EVENTS_PUBLISHED = Gauge(
    "hondenwedstrijd_events_published",
    "Number of events in the published calendar",
)

SCHEDULER_LAST_RUN = Gauge(
    "hondenwedstrijd_scheduler_last_run_timestamp",
    "Unix timestamp of last scheduled refresh",
)
