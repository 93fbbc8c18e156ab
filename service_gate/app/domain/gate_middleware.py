"""
ASGI wiring for the access gate.
"""

from typing import Optional

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.errors import ConfigurationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .access_gate import AccessGate, GateRequest
from .routes import ExclusionMatcher

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


def check_redirect_status(status: int) -> int:
    if status not in REDIRECT_STATUSES:
        raise ConfigurationError(
            "Gate redirect status must be a redirect code",
            details={"status": status, "allowed": sorted(REDIRECT_STATUSES)}
        )
    return status


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Runs the access gate in front of every non-excluded request."""

    def __init__(self, app, gate: AccessGate, matcher: Optional[ExclusionMatcher] = None,
                 metrics: Optional[MetricsCollector] = None, redirect_status: int = 307):
        super().__init__(app)
        self.gate = gate
        self.matcher = matcher or ExclusionMatcher()
        self.metrics = metrics
        self.redirect_status = check_redirect_status(redirect_status)
        self.logger = get_logger("gate.middleware")

    async def dispatch(self, request: Request, call_next):
        gate_request = GateRequest.from_request(request)
        if not self.matcher.should_gate(gate_request.path):
            return await call_next(request)

        decision = self.gate.evaluate(gate_request)

        if self.metrics is not None:
            self.metrics.record_gate_decision(
                decision.classification.value,
                decision.outcome.value
            )

        if decision.is_redirect:
            return RedirectResponse(decision.location, status_code=self.redirect_status)

        return await call_next(request)
