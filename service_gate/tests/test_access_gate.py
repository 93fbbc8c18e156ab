"""
Unit tests for AccessGate.
"""

import pytest
from unittest.mock import MagicMock
from fastapi import Request
from starlette.datastructures import Headers

from service_gate.app.domain.access_gate import (
    AccessGate,
    GateDecision,
    GateOutcome,
    GateRequest,
)
from service_gate.app.domain.routes import RouteClass, RouteConfig


PUBLIC_PATHS = [
    "/",
    "/about",
    "/contact",
    "/gallery",
    "/news",
    "/gbhs-history",
    "/auth",
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/logout",
]


class TestAccessGate:
    """Test cases for AccessGate."""

    @pytest.fixture
    def gate(self):
        """Create AccessGate with the default route table."""
        return AccessGate()

    @pytest.mark.parametrize("path", PUBLIC_PATHS)
    def test_public_routes_continue_without_token(self, gate, path):
        """Public routes pass with no token."""
        decision = gate.evaluate(GateRequest(path=path))

        assert decision.outcome is GateOutcome.CONTINUE
        assert decision.classification is RouteClass.PUBLIC
        assert decision.location is None

    @pytest.mark.parametrize("path", [
        "/about/facility/5",
        "/about/achievement/12",
        "/news/42",
        "/gallery/2024/sports",
        "/auth/callback",
    ])
    def test_public_subpaths_continue(self, gate, path):
        """Paths below a public route are public too."""
        decision = gate.evaluate(GateRequest(path=path))

        assert decision.outcome is GateOutcome.CONTINUE
        assert decision.classification is RouteClass.PUBLIC

    def test_public_route_ignores_token(self, gate):
        """A token does not change the outcome for public routes."""
        request = GateRequest(path="/contact", cookies={"token": "xyz"})

        decision = gate.evaluate(request)

        assert decision == GateDecision(GateOutcome.CONTINUE, RouteClass.PUBLIC)

    def test_root_route_matches_only_itself(self, gate):
        """'/' is public, but not a prefix for every path."""
        assert gate.evaluate(GateRequest(path="/")).outcome is GateOutcome.CONTINUE

        decision = gate.evaluate(GateRequest(path="/teacher"))

        assert decision.classification is RouteClass.PROTECTED
        assert decision.outcome is GateOutcome.REDIRECT

    def test_public_prefix_requires_segment_boundary(self, gate):
        """'/newsletter' does not ride on the '/news' route."""
        decision = gate.evaluate(GateRequest(path="/newsletter"))

        assert decision.classification is RouteClass.PROTECTED
        assert decision.outcome is GateOutcome.REDIRECT

    @pytest.mark.parametrize("path", ["/api/news", "/api/users/me", "/api/students/7/grades"])
    def test_api_routes_continue_without_token(self, gate, path):
        """API routes authorize themselves downstream."""
        decision = gate.evaluate(GateRequest(path=path))

        assert decision.outcome is GateOutcome.CONTINUE
        assert decision.classification is RouteClass.API

    def test_api_root_without_trailing_slash_is_protected(self, gate):
        """Only '/api/...' counts as the API surface."""
        decision = gate.evaluate(GateRequest(path="/api"))

        assert decision.classification is RouteClass.PROTECTED

    def test_protected_route_redirects_without_token(self, gate):
        """Missing token sends the visitor to login with a return path."""
        decision = gate.evaluate(GateRequest(path="/teacher"))

        assert decision.outcome is GateOutcome.REDIRECT
        assert decision.is_redirect
        assert decision.location == "/auth?mode=login&redirect=%2Fteacher"
        assert decision.token_present is False

    def test_redirect_encodes_nested_path(self, gate):
        """Every slash of the original path is encoded."""
        decision = gate.evaluate(GateRequest(path="/admin/reports"))

        assert decision.location == "/auth?mode=login&redirect=%2Fadmin%2Freports"

    def test_protected_route_with_cookie_continues(self, gate):
        """A token cookie is enough for protected pages."""
        request = GateRequest(path="/admin/reports", cookies={"token": "xyz"})

        decision = gate.evaluate(request)

        assert decision.outcome is GateOutcome.CONTINUE
        assert decision.classification is RouteClass.PROTECTED
        assert decision.token_present is True

    def test_protected_route_with_bearer_header_continues(self, gate):
        """A bearer header is enough when no cookie is sent."""
        request = GateRequest(path="/admin/reports", headers={"authorization": "Bearer xyz"})

        decision = gate.evaluate(request)

        assert decision.outcome is GateOutcome.CONTINUE
        assert decision.token_present is True

    def test_protected_route_with_empty_bearer_redirects(self, gate):
        """'Bearer ' with nothing after it is no token."""
        request = GateRequest(path="/admin", headers={"authorization": "Bearer "})

        decision = gate.evaluate(request)

        assert decision.outcome is GateOutcome.REDIRECT


class TestTokenExtraction:
    """Test cases for AccessGate.extract_token."""

    @pytest.fixture
    def gate(self):
        """Create AccessGate with the default route table."""
        return AccessGate()

    def test_cookie_token(self, gate):
        """Cookie value is returned as-is."""
        request = GateRequest(path="/teacher", cookies={"token": "abc123"})

        assert gate.extract_token(request) == "abc123"

    def test_bearer_header_token(self, gate):
        """The 'Bearer ' prefix is stripped."""
        request = GateRequest(path="/teacher", headers={"authorization": "Bearer abc123"})

        assert gate.extract_token(request) == "abc123"

    def test_cookie_takes_precedence(self, gate):
        """Cookie wins over the header."""
        request = GateRequest(
            path="/teacher",
            cookies={"token": "from-cookie"},
            headers={"authorization": "Bearer from-header"}
        )

        assert gate.extract_token(request) == "from-cookie"

    def test_empty_cookie_falls_back_to_header(self, gate):
        """An empty cookie is treated as missing."""
        request = GateRequest(
            path="/teacher",
            cookies={"token": ""},
            headers={"authorization": "Bearer from-header"}
        )

        assert gate.extract_token(request) == "from-header"

    def test_header_name_is_case_insensitive(self, gate):
        """Header lookup ignores case."""
        request = GateRequest(path="/teacher", headers={"Authorization": "Bearer abc123"})

        assert gate.extract_token(request) == "abc123"

    def test_prefix_is_case_sensitive(self, gate):
        """A lowercase scheme is not stripped."""
        request = GateRequest(path="/teacher", headers={"authorization": "bearer abc123"})

        assert gate.extract_token(request) == "bearer abc123"

    def test_header_without_prefix_is_used_as_is(self, gate):
        """A bare header value still counts as a token."""
        request = GateRequest(path="/teacher", headers={"authorization": "abc123"})

        assert gate.extract_token(request) == "abc123"

    def test_prefix_only_stripped_at_start(self, gate):
        """'Bearer ' later in the value is part of the token."""
        request = GateRequest(path="/teacher", headers={"authorization": "xBearer abc"})

        assert gate.extract_token(request) == "xBearer abc"

    def test_token_is_not_trimmed(self, gate):
        """Whitespace after the prefix is kept."""
        request = GateRequest(path="/teacher", headers={"authorization": "Bearer  abc123 "})

        assert gate.extract_token(request) == " abc123 "

    def test_no_token(self, gate):
        """No cookie and no header gives None."""
        assert gate.extract_token(GateRequest(path="/teacher")) is None

    def test_custom_cookie_name(self):
        """The cookie name comes from the route config."""
        gate = AccessGate(RouteConfig(token_cookie="session"))
        request = GateRequest(path="/teacher", cookies={"token": "ignored", "session": "s1"})

        assert gate.extract_token(request) == "s1"


class TestGateRequest:
    """Test cases for GateRequest."""

    def test_from_request(self):
        """Path, cookies and headers are read from the Starlette request."""
        request = MagicMock(spec=Request)
        request.scope = {}
        request.url.path = "/admin/users"
        request.cookies = {"token": "xyz"}
        request.headers = Headers({"Authorization": "Bearer abc"})

        gate_request = GateRequest.from_request(request)

        assert gate_request.path == "/admin/users"
        assert gate_request.cookies == {"token": "xyz"}
        assert gate_request.header("authorization") == "Bearer abc"

    def test_from_request_prefers_raw_path(self):
        """The undecoded path is used when the server provides it."""
        request = MagicMock(spec=Request)
        request.scope = {"raw_path": b"/a%20b?x=1"}
        request.url.path = "/a b"
        request.cookies = {}
        request.headers = Headers({})

        assert GateRequest.from_request(request).path == "/a%20b"

    def test_header_missing(self):
        """Unknown headers return None."""
        assert GateRequest(path="/").header("authorization") is None


class TestLoginRedirectUrl:
    """Test cases for AccessGate.login_redirect_url."""

    def test_custom_auth_path(self):
        """Auth path and mode come from the route config."""
        gate = AccessGate(RouteConfig(auth_path="/login", login_mode="signin"))

        assert gate.login_redirect_url("/teacher") == "/login?mode=signin&redirect=%2Fteacher"

    def test_special_characters_are_encoded(self):
        """Spaces and ampersands in the path cannot break the query."""
        gate = AccessGate()

        url = gate.login_redirect_url("/teacher/a b&c")

        assert url == "/auth?mode=login&redirect=%2Fteacher%2Fa+b%26c"
