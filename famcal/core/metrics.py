from prometheus_client import Counter, Histogram, Gauge, REGISTRY
from prometheus_client.openmetrics.exposition import generate_latest
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import time

# HTTP Metrics
HTTP_REQUESTS_TOTAL = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

HTTP_REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path']
)

HTTP_REQUESTS_IN_PROGRESS = Gauge(
    'http_requests_in_progress',
    'Number of HTTP requests in progress',
    ['method', 'path']
)

# Projection Engine Metrics
OCCURRENCES_PROJECTED_TOTAL = Counter(
    'famcal_occurrences_projected_total',
    'Total occurrences returned by window projections'
)

MALFORMED_EVENTS_SKIPPED_TOTAL = Counter(
    'famcal_malformed_events_skipped_total',
    'Base events skipped because they do not end after they start'
)

UNKNOWN_RULES_TOTAL = Counter(
    'famcal_unknown_recurrence_rules_total',
    'Recurrence rules that fell back to weekly stepping'
)

OCCURRENCE_CAP_HITS_TOTAL = Counter(
    'famcal_occurrence_cap_hits_total',
    'Recurring events whose expansion stopped at the per-event cap'
)

# Database Metrics
DB_QUERIES_TOTAL = Counter(
    'db_queries_total',
    'Total database queries',
    ['operation']
)

db_query_duration_seconds = Histogram(
    "db_query_duration_seconds",
    "Database query duration in seconds",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5]
)

class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for collecting request metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process the request and collect metrics."""
        start_time = time.time()

        HTTP_REQUESTS_IN_PROGRESS.labels(
            method=request.method,
            path=request.url.path
        ).inc()

        try:
            response = await call_next(request)

            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                path=request.url.path
            ).observe(time.time() - start_time)

            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                path=request.url.path,
                status=str(response.status_code)
            ).inc()

            return response
        except Exception:
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                path=request.url.path,
                status="500"
            ).inc()
            raise
        finally:
            HTTP_REQUESTS_IN_PROGRESS.labels(
                method=request.method,
                path=request.url.path
            ).dec()

def record_db_operation(operation: str, duration: float) -> None:
    """Record database operation metrics."""
    DB_QUERIES_TOTAL.labels(operation=operation).inc()
    db_query_duration_seconds.labels(operation=operation).observe(duration)

def setup_metrics(app) -> None:
    """Configure metrics collection for the application."""
    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return Response(
            generate_latest(REGISTRY),
            media_type="text/plain"
        )
