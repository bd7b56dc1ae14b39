from prometheus_client import Counter, Histogram, Gauge, generate_latest
import time
from functools import wraps

# Database Metrics
db_query_duration_seconds = Histogram(
    "replayvault_db_query_duration_seconds", "Database query duration", ["operation"]
)

db_query_total = Counter("replayvault_db_queries_total", "Total database queries", ["operation", "status"])

db_replays_total = Gauge("replayvault_replays_total", "Total number of replays", ["status"])

# Lifecycle Metrics
replay_status_changes_total = Counter(
    "replayvault_replay_status_changes_total", "Replay status changes", ["status", "source", "outcome"]
)

replay_exports_total = Counter("replayvault_replay_exports_total", "Bulk exports built", ["outcome"])

replay_export_entries_total = Counter("replayvault_replay_export_entries_total", "Replay files written to exports")

replays_cleaned_total = Counter("replayvault_replays_cleaned_total", "Replays rejected by the cleanup job", ["outcome"])


def track_db_query(operation):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                db_query_total.labels(operation=operation, status="success").inc()
                return result
            except Exception:
                db_query_total.labels(operation=operation, status="error").inc()
                raise
            finally:
                duration = time.time() - start_time
                db_query_duration_seconds.labels(operation=operation).observe(duration)

        return wrapper

    return decorator


def update_db_metrics():
    """Refresh per-status replay gauges"""
    from db import db
    from sqlalchemy import func
    from models import Replay, ReplayStatus

    counts = dict(db.session.query(Replay.status, func.count(Replay.id)).group_by(Replay.status).all())
    for status in ReplayStatus:
        db_replays_total.labels(status=status.value).set(counts.get(status, 0))


def get_metrics_export():
    """Prometheus text exposition of all metrics"""
    update_db_metrics()
    return generate_latest()
