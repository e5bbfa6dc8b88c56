"""
HTTP API
========
FastAPI routers and application factory.
"""

from .app import create_app
from .health import create_health_router, HealthStatus, ComponentHealth
from .routes import create_otp_router

__all__ = [
    "create_app",
    "create_health_router",
    "create_otp_router",
    "HealthStatus",
    "ComponentHealth",
]
