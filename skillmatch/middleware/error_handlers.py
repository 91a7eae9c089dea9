"""
Request middleware for the SkillMatch API: uniform error bodies, request logging, timing
"""
import time
import traceback
import uuid
from datetime import datetime
from typing import Any, Tuple

from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError as PydanticValidationError

from skillmatch.utils.exceptions import SkillMatchError, map_to_http_exception
from skillmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

# Probes are served but never logged
HEALTH_PATHS = ("/", "/health")


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', None) or str(uuid.uuid4())


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Standardized JSON error body"""
    if isinstance(detail, str):
        detail = {"message": detail}
    elif not isinstance(detail, dict):
        detail = {"message": str(detail)}

    content = {
        "success": False,
        "timestamp": datetime.utcnow().isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail
    }
    return JSONResponse(status_code=status_code, content=content, headers={"X-Request-ID": request_id})


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Outermost middleware: assigns a request id and turns escaped exceptions into JSON errors"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as exc:
            status_code, detail = self.describe(exc, request, request_id)
            return error_response(request_id, status_code, detail)

        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def describe(exc: Exception, request: Request, request_id: str) -> Tuple[int, Any]:
        """Status code and error body for an exception, logged at a level matching its severity"""
        where = f"{request.method} {request.url.path}"
        context = {"request_id": request_id, "method": request.method, "path": request.url.path}

        if isinstance(exc, SkillMatchError):
            logger.error(
                f"{exc.__class__.__name__} in {where}: {exc.message}",
                extra={**context, "error_code": exc.error_code, "details": exc.details}
            )
            http_exc = map_to_http_exception(exc)
            return http_exc.status_code, http_exc.detail

        if isinstance(exc, RequestValidationError):
            logger.warning(f"Request validation failed in {where}: {exc}", extra=context)
            return 422, {
                "error": "Validation failed",
                "message": "Request data validation failed",
                "validation_errors": jsonable_encoder(exc.errors()),
            }

        if isinstance(exc, PydanticValidationError):
            # a stored document or computed record failed model validation
            logger.error(f"Model validation failed in {where}: {exc}", extra=context)
            return 400, {
                "error": "Data validation failed",
                "message": "Invalid data format or values",
                "validation_errors": jsonable_encoder(exc.errors(include_url=False, include_context=False)),
            }

        if isinstance(exc, HTTPException):
            logger.warning(f"HTTP {exc.status_code} in {where}: {exc.detail}", extra=context)
            return exc.status_code, exc.detail

        logger.error(
            f"Unhandled {exc.__class__.__name__} in {where}: {exc}",
            extra={**context, "traceback": traceback.format_exc()},
            exc_info=True
        )
        # internal details stay in the logs
        return 500, {
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later.",
        }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and its outcome"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in HEALTH_PATHS:
            return await call_next(request)

        start_time = time.time()
        request_id = _request_id(request)

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            processing_time = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {processing_time:.3f}s",
                extra={"request_id": request_id, "exception": str(exc)}
            )
            raise

        processing_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
            extra={"request_id": request_id, "status_code": response.status_code}
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Flags slow requests and adds an X-Processing-Time header"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        processing_time = time.time() - start_time

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={"request_id": _request_id(request), "threshold": self.slow_request_threshold}
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response
