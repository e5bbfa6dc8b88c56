"""
Prometheus Metrics
==================
Counters for OTP issuance, throttling, verification outcomes and delivery.
"""

from prometheus_client import CollectorRegistry, Counter, generate_latest, CONTENT_TYPE_LATEST

# Dedicated registry so embedding applications keep control of the default one
OTP_REGISTRY = CollectorRegistry()

OTP_ISSUED_TOTAL = Counter(
    name="otp_issued_total",
    documentation="Verification codes generated and stored",
    registry=OTP_REGISTRY,
)

OTP_THROTTLED_TOTAL = Counter(
    name="otp_throttled_total",
    documentation="Issuance requests rejected by rate limiting",
    labelnames=["dimension"],
    registry=OTP_REGISTRY,
)

OTP_VERIFICATIONS_TOTAL = Counter(
    name="otp_verifications_total",
    documentation="Verification attempts by outcome",
    labelnames=["outcome"],
    registry=OTP_REGISTRY,
)

OTP_DELIVERY_FAILURES_TOTAL = Counter(
    name="otp_delivery_failures_total",
    documentation="Codes stored but not delivered",
    registry=OTP_REGISTRY,
)


def record_issued() -> None:
    OTP_ISSUED_TOTAL.inc()


def record_throttled(dimension: str) -> None:
    OTP_THROTTLED_TOTAL.labels(dimension=dimension).inc()


def record_verification(outcome: str) -> None:
    OTP_VERIFICATIONS_TOTAL.labels(outcome=outcome).inc()


def record_delivery_failure() -> None:
    OTP_DELIVERY_FAILURES_TOTAL.inc()


def get_metrics_text() -> bytes:
    """Render the OTP registry in Prometheus exposition format."""
    return generate_latest(OTP_REGISTRY)


__all__ = [
    "OTP_REGISTRY",
    "CONTENT_TYPE_LATEST",
    "record_issued",
    "record_throttled",
    "record_verification",
    "record_delivery_failure",
    "get_metrics_text",
]
