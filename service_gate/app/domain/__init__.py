"""
Domain logic for the access gate service.

Route configuration and classification, the gate decision itself, its ASGI
middleware, and the auth page's post-login landing table.
"""

from .access_gate import AccessGate, GateDecision, GateOutcome, GateRequest
from .gate_middleware import AccessGateMiddleware
from .landing import landing_path_for, post_login_path
from .routes import ExclusionMatcher, RouteClass, RouteConfig

__all__ = [
    "AccessGate",
    "AccessGateMiddleware",
    "ExclusionMatcher",
    "GateDecision",
    "GateOutcome",
    "GateRequest",
    "RouteClass",
    "RouteConfig",
    "landing_path_for",
    "post_login_path",
]
