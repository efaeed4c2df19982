"""
Health checks served by the admin server

Liveness and readiness probes are lists of named check functions. A
check fails by raising or by returning an exception.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import threading
from typing import Any, Callable, Dict, List, Optional

from contextlog.core.errors import error_text

HealthCheck = Callable[[], Optional[BaseException]]


class HealthStatus(Enum):
    """Health status enumeration."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheckResult:
    """
    Result of running a set of health checks.

    ``issues`` maps each failing check to its error text.
    """
    status: HealthStatus
    issues: Dict[str, str] = field(default_factory=dict)
    checks: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON export.

        Returns:
            Dictionary representation
        """
        return {
            "status": self.status.value,
            "issues": self.issues,
            "checks": self.checks,
            "timestamp": self.timestamp.isoformat(),
        }

    @property
    def is_healthy(self) -> bool:
        """Check if status is healthy."""
        return self.status == HealthStatus.HEALTHY


class HealthChecks:
    """Named checks run together for one probe."""

    def __init__(self):
        self._checks: Dict[str, HealthCheck] = {}
        self._lock = threading.Lock()

    def add(self, name: str, check: HealthCheck) -> None:
        """
        Register a check.

        Raises:
            TypeError: If check is not callable
            ValueError: If name is already registered
        """
        if not callable(check):
            raise TypeError("check must be callable")
        with self._lock:
            if name in self._checks:
                raise ValueError(f"health check {name!r} already registered")
            self._checks[name] = check

    def run(self) -> HealthCheckResult:
        """Run every check; all must pass for a healthy result."""
        with self._lock:
            checks = list(self._checks.items())

        issues: Dict[str, str] = {}
        for name, check in checks:
            try:
                err = check()
            except Exception as e:
                err = e
            if err is not None:
                issues[name] = error_text(err)

        return HealthCheckResult(
            status=HealthStatus.UNHEALTHY if issues else HealthStatus.HEALTHY,
            issues=issues,
            checks=[name for name, _ in checks],
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._checks)
