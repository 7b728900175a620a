"""Exception handler for structured error responses."""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from ..exceptions import IsoTokenException

logger = logging.getLogger(__name__)


async def isotoken_exception_handler(request: Request, exc: IsoTokenException) -> JSONResponse:
    """
    Handle IsoToken exceptions and return structured JSON responses.

    Args:
        request: FastAPI request object
        exc: IsoTokenException instance

    Returns:
        JSONResponse with error details
    """
    body = exc.to_dict()
    logger.warning(
        f"IsoTokenException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": body["details"],
            "status_code": exc.status_code
        }
    )

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=body,
        headers=headers,
    )


def install_exception_handler(app: FastAPI) -> None:
    """Route every IsoTokenException raised by *app* through the handler."""
    app.add_exception_handler(IsoTokenException, isotoken_exception_handler)
