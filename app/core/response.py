"""
Response envelope helpers

Success: {"code": 0, "message": "success", "data": {...}}
Error:   {"code": <http status>, "message": "..."}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse

from app.core.errors import AppError

logger = logging.getLogger(__name__)


def success(data: Any) -> dict:
    """Wrap a payload in the success envelope"""
    return {"code": 0, "message": "success", "data": jsonable_encoder(data)}


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build an error envelope response"""
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "message": message},
    )


def error_from(exc: Exception) -> JSONResponse:
    """
    Map any exception to an error envelope
    
    Application errors keep their status and message; anything else is
    reported as a generic 500 and logged with its traceback.
    """
    if isinstance(exc, AppError):
        return error_response(exc.status_code, exc.message)
    
    logger.error("Unhandled error: %s", exc, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing exception handlers on the app"""
    
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return error_from(exc)
    
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))
    
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        return error_from(exc)
