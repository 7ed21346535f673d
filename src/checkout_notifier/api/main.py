"""FastAPI application for the checkout webhook receiver.

Exposes:
- POST /api/webhooks/stripe: Stripe webhook receiver
- GET /api/ping: health check
"""

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from mangum import Mangum

from checkout_notifier import __version__
from checkout_notifier.api.exceptions import register_exception_handlers
from checkout_notifier.api.middleware.correlation import CorrelationIdMiddleware
from checkout_notifier.api.routes.webhooks import router as webhooks_router
from checkout_notifier.config import get_settings
from checkout_notifier.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    configure_logging(get_settings().log_level)

    app = FastAPI(
        title="Checkout Notifier",
        description="Stripe checkout webhook receiver with order notifications",
        version=__version__,
    )

    app.add_middleware(CorrelationIdMiddleware)

    # Register exception handlers for consistent error responses
    register_exception_handlers(app)

    app.include_router(webhooks_router, prefix="/api")

    @app.get("/api/ping")
    async def ping() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "service": "checkout-notifier",
        }

    return app


app = create_app()

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = False) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: False)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("checkout_notifier.api.main:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
