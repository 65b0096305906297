"""Prometheus metrics for monitoring."""

from prometheus_client import Counter, Histogram

# Profile metrics
profiles_created_total = Counter("profiles_created_total", "Total number of profiles created")

profiles_edited_total = Counter("profiles_edited_total", "Total number of profile edits")

profiles_deleted_total = Counter("profiles_deleted_total", "Total number of profiles soft-deleted")

# Swipe / match metrics
swipes_total = Counter("swipes_total", "Total number of swipes recorded", ["direction"])

matches_created_total = Counter(
    "matches_created_total", "Reconciliations that produced a match", ["status"]
)  # status: created, existing

recommendations_served = Histogram(
    "recommendations_served", "Number of profiles returned per feed request", buckets=(0, 1, 2, 5, 10, 20, 50)
)

# Messaging metrics
messages_sent_total = Counter("messages_sent_total", "Total number of messages sent")

# Response time metrics
api_request_duration = Histogram(
    "api_request_duration_seconds", "API request duration in seconds", ["method", "endpoint", "status"]
)

# Safety metrics
reports_total = Counter("reports_total", "Total number of reports created", ["reason"])

blocks_total = Counter("blocks_total", "Total number of user blocks executed")

penalties_total = Counter("penalties_total", "Exposure penalties applied", ["kind"])
