"""
Access Gate Service package for the GBHS Bafia site.

The gate fronts every page request, enforcing:
- Public pages and the API surface pass straight through
- Other pages need a bearer token (cookie or Authorization header)
- Visitors without one are redirected to /auth with a return path

Structure:
- app.main: FastAPI app and middleware wiring.
- app.domain: Route table, gate decision, middleware, post-login landing.
"""
