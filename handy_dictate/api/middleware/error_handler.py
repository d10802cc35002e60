"""
Error handling for the bridge application.

Renders DictateError subclasses raised by routes (e.g. Handy unreachable
while fetching the latest transcription) as a JSON error envelope.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from handy_dictate.core.exceptions import DictateError


def register_error_handlers(app: FastAPI) -> None:
    """Attach the domain error handler to the FastAPI application.

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(DictateError)
    async def dictate_error_handler(_request: Request, exc: DictateError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "code": exc.code,
                "timestamp": exc.timestamp,
            },
        )
