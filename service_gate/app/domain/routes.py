"""
Route configuration for the access gate.

Holds the immutable public-route table, classifies request paths and decides
which paths reach the gate at all.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from shared.config import DEFAULT_GATE_MATCHER, DEFAULT_PUBLIC_ROUTES, BaseConfig
from shared.errors import ConfigurationError


class RouteClass(str, Enum):
    """Classification of a request path."""

    PUBLIC = "public"
    API = "api"
    PROTECTED = "protected"


@dataclass(frozen=True)
class RouteConfig:
    """Static gate configuration, fixed for the life of the process."""

    public_routes: Tuple[str, ...] = tuple(DEFAULT_PUBLIC_ROUTES)
    api_prefix: str = "/api/"
    auth_path: str = "/auth"
    login_mode: str = "login"
    token_cookie: str = "token"
    bearer_prefix: str = "Bearer "

    def __post_init__(self):
        # Accept any iterable but store a tuple so the table cannot be mutated.
        object.__setattr__(self, "public_routes", tuple(self.public_routes))

        bad_routes = [route for route in self.public_routes if not route.startswith("/")]
        if bad_routes:
            raise ConfigurationError(
                "Public routes must be absolute paths",
                details={"routes": bad_routes}
            )
        if not self.api_prefix.startswith("/"):
            raise ConfigurationError(
                "API prefix must be an absolute path",
                details={"api_prefix": self.api_prefix}
            )
        if not self.auth_path.startswith("/"):
            raise ConfigurationError(
                "Auth path must be an absolute path",
                details={"auth_path": self.auth_path}
            )

    @classmethod
    def from_settings(cls, settings: BaseConfig) -> "RouteConfig":
        """Build the route table from service settings."""
        return cls(
            public_routes=tuple(settings.gate_public_routes),
            api_prefix=settings.gate_api_prefix,
            auth_path=settings.gate_auth_path,
            login_mode=settings.gate_login_mode,
            token_cookie=settings.gate_token_cookie,
        )

    def is_public(self, path: str) -> bool:
        """Exact match or a match on a whole leading segment.

        "/" therefore only matches "/" itself; prefix matching it would need
        a path starting with "//".
        """
        return any(
            path == route or path.startswith(route + "/")
            for route in self.public_routes
        )

    def classify(self, path: str) -> RouteClass:
        if self.is_public(path):
            return RouteClass.PUBLIC
        if path.startswith(self.api_prefix):
            return RouteClass.API
        return RouteClass.PROTECTED


class ExclusionMatcher:
    """Routing-layer filter deciding whether a path is handed to the gate."""

    def __init__(self, pattern: str = DEFAULT_GATE_MATCHER):
        try:
            self._regex = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(
                "Invalid gate matcher pattern",
                details={"pattern": pattern, "error": str(e)}
            ) from e
        self.pattern = pattern

    def should_gate(self, path: str) -> bool:
        return self._regex.match(path) is not None
