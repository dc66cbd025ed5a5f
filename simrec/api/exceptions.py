"""Exception handlers for the SimRec API.

Maps SimRec errors to JSON responses with a uniform body::

    {"error": "UnknownUserError", "message": "...", "details": {...}}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from simrec.exceptions import InconsistentStateError, SimRecError

# Configure module logger
logger = logging.getLogger(__name__)


def error_response(exc: SimRecError) -> JSONResponse:
    """Build the JSON response for a SimRec error."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


async def simrec_error_handler(request: Request, exc: SimRecError) -> JSONResponse:
    log_extra = {
        "request_id": getattr(request.state, "request_id", None),
        "path": str(request.url.path),
        "error_type": type(exc).__name__,
        "status_code": exc.status_code,
    }

    if isinstance(exc, InconsistentStateError):
        # Engine invariant broken: a bug, not a bad request
        logger.error(f"Inconsistent engine state: {exc.message}", extra=log_extra, exc_info=exc)
    elif exc.status_code >= 500:
        logger.error(exc.message, extra=log_extra)
    else:
        logger.warning(exc.message, extra=log_extra)

    return error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the SimRec error handlers on ``app``."""
    app.add_exception_handler(SimRecError, simrec_error_handler)
