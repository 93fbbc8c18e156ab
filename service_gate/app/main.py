"""
Access gate service for the GBHS Bafia site.
"""

from typing import Any, Dict, Optional

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from service_gate.app.domain.access_gate import AccessGate
from service_gate.app.domain.gate_middleware import AccessGateMiddleware, check_redirect_status
from service_gate.app.domain.routes import ExclusionMatcher, RouteConfig


class GateService(BaseService):
    """Hosts the site behind the access gate.

    Page and API handlers are mounted on ``service.app`` with
    ``include_router``; the gate sits in front of all of them.
    """

    def __init__(self, config: Optional[ServiceConfig] = None):
        config = config or get_config("gate", 8000)
        # Built before the base class wires middleware.
        self.routes = RouteConfig.from_settings(config)
        self.gate = AccessGate(self.routes)
        self.matcher = ExclusionMatcher(config.gate_matcher)
        check_redirect_status(config.gate_redirect_status)

        super().__init__("gate", config.port, config=config)

        self.logger.info(
            "Access gate configured",
            public_routes=list(self.routes.public_routes),
            auth_path=self.routes.auth_path,
            matcher=self.matcher.pattern
        )

        # Expose service instance via app state for introspection/testing
        self.app.state.gate_service = self

    def _setup_service_middleware(self):
        self.app.add_middleware(
            AccessGateMiddleware,
            gate=self.gate,
            matcher=self.matcher,
            metrics=self.metrics,
            redirect_status=self.config.gate_redirect_status,
        )

    async def _health_details(self) -> Dict[str, Any]:
        return {
            "public_routes": len(self.routes.public_routes),
            "auth_path": self.routes.auth_path,
            "api_prefix": self.routes.api_prefix,
        }


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = GateService(config)
    return service.app


if __name__ == "__main__":
    service = GateService()
    service.run()
