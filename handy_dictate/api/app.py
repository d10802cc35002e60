"""
FastAPI application factory for the trigger-intake bridge.

Hosts that cannot load Python code forward their command events here.
``create_app()`` wires error handlers, routes and the health endpoint; the
module-level ``app`` instance allows ``uvicorn handy_dictate.api.app:app``.
"""

from datetime import UTC, datetime

from fastapi import FastAPI

from handy_dictate import __version__
from handy_dictate.api.middleware.error_handler import register_error_handlers
from handy_dictate.api.routes import commands
from handy_dictate.core.models import HealthResponse
from handy_dictate.plugin import DictatePlugin


def create_app(plugin: DictatePlugin | None = None) -> FastAPI:
    """Build and return a configured FastAPI application.

    Args:
        plugin: Plugin instance to serve; one is built from settings if omitted.
            It lives on ``app.state`` for the whole process, so recording
            state survives between requests.
    """

    app = FastAPI(
        title="handy-dictate",
        description="Toggle Handy speech-to-text recording from a host command.",
        version=__version__,
    )
    app.state.plugin = plugin or DictatePlugin()

    # -- Error handlers --
    register_error_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, timestamp=datetime.now(UTC))

    app.include_router(commands.router)

    return app


app = create_app()
