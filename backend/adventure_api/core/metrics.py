"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Auth metrics
registrations = Counter(
    'registrations_total',
    'User registration attempts',
    ['source', 'result']  # source: password, webhook; result: created, conflict
)

logins = Counter(
    'logins_total',
    'Login attempts',
    ['result']  # success, not_found, unverified, bad_password
)

otps_issued = Counter(
    'otps_issued_total',
    'One-time passcodes issued',
    ['purpose']  # signup, resend, password_reset
)

# Booking metrics
booking_attempts = Counter(
    'item_booking_attempts_total',
    'Item booking attempts',
    ['status']  # created, rejected, payment_error
)

booking_transitions = Counter(
    'item_booking_transitions_total',
    'Booking status transitions',
    ['to_status']
)

# Outbound calls
external_calls = Counter(
    'external_calls_total',
    'Calls to third-party services',
    ['service', 'outcome']  # revolut/opencage/smtp, success/error
)

request_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency',
    ['method', 'status_code'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_registration(source: str, result: str):
    registrations.labels(source=source, result=result).inc()


def record_login(result: str):
    logins.labels(result=result).inc()


def record_otp_issued(purpose: str):
    otps_issued.labels(purpose=purpose).inc()


def record_booking_attempt(status: str):
    """Record booking attempt. Status: created, rejected, payment_error"""
    booking_attempts.labels(status=status).inc()


def record_booking_transition(to_status: str):
    booking_transitions.labels(to_status=to_status).inc()


def record_external_call(service: str, outcome: str):
    external_calls.labels(service=service, outcome=outcome).inc()


def observe_request(method: str, status_code: int, seconds: float):
    request_latency.labels(method=method, status_code=str(status_code)).observe(seconds)
