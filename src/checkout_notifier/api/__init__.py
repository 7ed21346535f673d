"""HTTP layer: FastAPI app, routes, middleware and error handlers."""
