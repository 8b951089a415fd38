"""Maps domain errors to JSON responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..domain.exceptions import DomainException

logger = logging.getLogger(__name__)


def error_body(exc: DomainException) -> dict:
    body = {"detail": exc.message, "code": exc.code}
    if exc.context:
        body["context"] = exc.context
    return body


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}", extra={"path": request.url.path})
    else:
        logger.info(f"{exc.code}: {exc.message}", extra={"path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    # Value objects and entity invariants raise plain ValueError
    return JSONResponse(status_code=422, content={"detail": str(exc), "code": "invalid_value"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(ValueError, value_error_handler)
