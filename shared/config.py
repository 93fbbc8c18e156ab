"""
Shared configuration management for the GBHS access gate.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PUBLIC_ROUTES: List[str] = [
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

# Static assets, image optimizer output, favicon and the public folder never
# reach the gate; neither do the service's own probes and API docs.
DEFAULT_GATE_MATCHER = (
    r"^/(?!_next/static|_next/image|favicon\.ico|public/|health$|metrics$|docs$|redoc$|openapi\.json$).*"
)


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ACCESS_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Access gate
    gate_public_routes: List[str] = Field(default_factory=lambda: list(DEFAULT_PUBLIC_ROUTES))
    gate_auth_path: str = "/auth"
    gate_login_mode: str = "login"
    gate_api_prefix: str = "/api/"
    gate_token_cookie: str = "token"
    gate_matcher: str = DEFAULT_GATE_MATCHER
    gate_redirect_status: int = 307


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
