"""
Prometheus Metrics Module

Provides instrumentation for the dashboard API:
- Request counts and durations
- Aggregate cache fallbacks (views empty or stale)
- Aggregation input sizes
- Error tracking

Usage:
    from server.metrics import metrics
    metrics.aggregate_fallbacks.labels(dimension="country").inc()
    metrics.aggregation_rows.labels(dimension="department").observe(len(votes))
"""

from prometheus_client import Counter, Histogram, generate_latest, REGISTRY


class VoteboardMetrics:
    """Centralized metrics for the voteboard API"""

    def __init__(self):
        # API metrics
        self.api_requests = Counter(
            'voteboard_api_requests_total',
            'Total API requests',
            ['endpoint', 'method', 'status_code']
        )

        self.api_request_duration = Histogram(
            'voteboard_api_request_duration_seconds',
            'API request duration',
            ['endpoint', 'method'],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
        )

        # Aggregation metrics
        self.aggregate_fallbacks = Counter(
            'voteboard_aggregate_fallbacks_total',
            'Reads that fell back from an empty aggregate view to raw votes',
            ['dimension']  # candidate, country
        )

        self.aggregation_rows = Histogram(
            'voteboard_aggregation_rows',
            'Rows fed into one aggregation pass',
            ['dimension'],
            buckets=[0, 10, 100, 1000, 10000, 100000, 1000000]
        )

        # Error metrics
        self.errors = Counter(
            'voteboard_errors_total',
            'Total errors by component and type',
            ['component', 'error_type']
        )

    def record_error(self, component: str, error: Exception):
        """Record an error

        Args:
            component: Component name (compare/map/departments/database)
            error: Exception instance
        """
        error_type = type(error).__name__
        self.errors.labels(component=component, error_type=error_type).inc()


# Global metrics instance
metrics = VoteboardMetrics()


def get_metrics_text() -> str:
    """Get Prometheus metrics in text format"""
    return generate_latest(REGISTRY).decode('utf-8')
