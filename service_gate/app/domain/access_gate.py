"""
Access gate for the school site.

Decides, per request, whether a page request continues to its handler or is
redirected to the login page with the original path as a return hint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional
from urllib.parse import urlencode

from fastapi import Request

from shared.logging import get_logger
from .routes import RouteClass, RouteConfig


class GateOutcome(str, Enum):
    CONTINUE = "continue"
    REDIRECT = "redirect"


def wire_path(request: Request) -> str:
    """Request path as sent by the client, percent-escapes left intact."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        # Servers may omit raw_path; fall back to the decoded path.
        return request.url.path
    return raw_path.split(b"?", 1)[0].decode("latin-1")


@dataclass(frozen=True)
class GateRequest:
    """The parts of an inbound request the gate looks at."""

    path: str
    cookies: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: Request) -> "GateRequest":
        return cls(
            path=wire_path(request),
            cookies=dict(request.cookies),
            headers=request.headers,
        )

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        value = self.headers.get(name)
        if value is not None:
            return value
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    classification: RouteClass
    location: Optional[str] = None
    token_present: bool = False

    @property
    def is_redirect(self) -> bool:
        return self.outcome is GateOutcome.REDIRECT


class AccessGate:
    """Route access gate.

    Public routes and the API surface always pass. Any other path passes only
    when a bearer token is present; the token itself is not verified, that is
    left to the destination page or handler.
    """

    def __init__(self, routes: Optional[RouteConfig] = None):
        self.routes = routes or RouteConfig()
        self.logger = get_logger("gate.access_gate")

    def extract_token(self, request: GateRequest) -> Optional[str]:
        """Token from the cookie, else from the Authorization header.

        An empty cookie falls through to the header. The "Bearer " prefix is
        stripped literally and case-sensitively; a header without it is
        taken as-is.
        """
        token = request.cookies.get(self.routes.token_cookie)
        if token:
            return token

        auth_header = request.header("authorization")
        if not auth_header:
            return None

        prefix = self.routes.bearer_prefix
        if auth_header.startswith(prefix):
            auth_header = auth_header[len(prefix):]

        return auth_header or None

    def login_redirect_url(self, path: str) -> str:
        query = urlencode({"mode": self.routes.login_mode, "redirect": path})
        return f"{self.routes.auth_path}?{query}"

    def evaluate(self, request: GateRequest) -> GateDecision:
        """Decide whether ``request`` continues or is sent to the login page."""
        classification = self.routes.classify(request.path)

        if classification is not RouteClass.PROTECTED:
            # API handlers run their own authorization.
            self.logger.debug(
                "Gate pass-through",
                path=request.path,
                classification=classification.value
            )
            return GateDecision(GateOutcome.CONTINUE, classification)

        token = self.extract_token(request)
        if not token:
            location = self.login_redirect_url(request.path)
            self.logger.info(
                "Gate redirect to login",
                path=request.path,
                location=location
            )
            return GateDecision(
                GateOutcome.REDIRECT,
                classification,
                location=location
            )

        self.logger.debug("Gate token present", path=request.path)
        return GateDecision(
            GateOutcome.CONTINUE,
            classification,
            token_present=True
        )
