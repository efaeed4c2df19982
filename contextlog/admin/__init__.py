"""
Admin module - operational HTTP endpoints

Provides metrics, health checks and debug routes for services using
contextlog.
"""

from contextlog.admin.health import (
    HealthChecks,
    HealthCheckResult,
    HealthStatus,
)
from contextlog.admin.server import AdminServer, RequestLoggingMiddleware, parse_bind_addr

__all__ = [
    "AdminServer",
    "RequestLoggingMiddleware",
    "parse_bind_addr",
    "HealthChecks",
    "HealthCheckResult",
    "HealthStatus",
]
