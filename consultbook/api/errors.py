from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from consultbook.application.exceptions import (
    FlowStateError,
    ServiceNotFoundError,
    SessionNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": exc.errors})


async def _flow_state_error(request: Request, exc: FlowStateError) -> JSONResponse:
    logger.info("Rejected out-of-order booking command", extra={"reason": str(exc)})
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def _not_found(request: Request, exc: LookupError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(FlowStateError, _flow_state_error)
    app.add_exception_handler(ServiceNotFoundError, _not_found)
    app.add_exception_handler(SessionNotFoundError, _not_found)
