"""
Prometheus metrics: HTTP traffic plus POS business counters.

/metrics is unauthenticated and never license-gated; keep it on the
internal network.
"""
import os
import time

from flask import Blueprint, Response, g, request
from prometheus_client import (
    CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, Counter, Histogram, generate_latest, multiprocess
)

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share samples through PROMETHEUS_MULTIPROC_DIR
if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    _register_in = None
else:
    registry = REGISTRY
    _register_in = REGISTRY

http_requests_total = Counter(
    'salon_pos_http_requests_total',
    'HTTP requests by blueprint endpoint and status',
    ['method', 'endpoint', 'http_status'],
    registry=_register_in
)

http_request_duration_seconds = Histogram(
    'salon_pos_http_request_duration_seconds',
    'HTTP request latency',
    ['endpoint'],
    registry=_register_in,
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)
)

pos_checkouts_total = Counter(
    'pos_checkouts_total',
    'Checkout attempts by outcome (success, rejected, failed)',
    ['outcome'],
    registry=_register_in
)

pos_parked_sales_total = Counter(
    'pos_parked_sales_total',
    'Parked sale events (parked, resumed, discarded)',
    ['event'],
    registry=_register_in
)


def setup_metrics_instrumentation(app):
    """Time every request and count it by endpoint once the response is ready."""

    @app.before_request
    def _start_request_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def _record_request(response):
        started = g.pop('request_started_at', None)
        if started is None:
            return response

        endpoint = request.endpoint or 'unmatched'
        http_request_duration_seconds.labels(endpoint=endpoint).observe(time.perf_counter() - started)
        http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            http_status=str(response.status_code)
        ).inc()
        return response


@metrics_bp.route('/metrics')
def metrics():
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
