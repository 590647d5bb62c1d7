"""
Request size limiting middleware for FastAPI.
Protects the recommendation endpoint from oversized payloads.
"""
from typing import Any, Optional, Set
import json
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from cloudopti.core.config import config

logger = logging.getLogger(__name__)


# Endpoints that require size limiting
PROTECTED_ENDPOINTS: Set[str] = {
    "/api/recommendations",
}


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "error": error,
            "message": message,
        }
    )


class RequestSizeLimiterMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for request size limiting.
    
    Applies size limits only to configured endpoints.
    Other routes pass through untouched.
    """
    
    def __init__(
        self,
        app: ASGIApp,
        max_body_size: int = None,
        max_technologies: int = None
    ):
        super().__init__(app)
        self.max_body_size = max_body_size or config.MAX_REQUEST_BODY_SIZE
        self.max_technologies = max_technologies or config.MAX_TECHNOLOGIES
    
    async def dispatch(self, request: Request, call_next):
        """
        Process request and apply size limits if applicable.
        
        Args:
            request: FastAPI request object
            call_next: Next middleware or route handler
        
        Returns:
            Response object
        """
        path = request.url.path
        
        if path not in PROTECTED_ENDPOINTS:
            return await call_next(request)
        
        # Check Content-Length header before reading the body
        content_length = request.headers.get("Content-Length")
        if content_length:
            try:
                if int(content_length) > self.max_body_size:
                    logger.info(
                        f"Request body size exceeded for {path}: "
                        f"{content_length} bytes (limit: {self.max_body_size})"
                    )
                    return self._too_large_response()
            except ValueError:
                # Invalid Content-Length header, fall through to body reading
                pass
        
        body_bytes = await request.body()
        if len(body_bytes) > self.max_body_size:
            logger.info(
                f"Request body size exceeded for {path}: "
                f"{len(body_bytes)} bytes (limit: {self.max_body_size})"
            )
            return self._too_large_response()
        
        if body_bytes:
            try:
                body_json = json.loads(body_bytes.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                # Malformed body - let FastAPI report the validation error
                body_json = None
            
            validation_error = self._validate_payload(body_json)
            if validation_error:
                logger.info(f"Payload validation failed for {path}: {validation_error}")
                return _error_response(422, "too_many_technologies", validation_error)
        
        return await call_next(request)
    
    def _too_large_response(self) -> JSONResponse:
        return _error_response(
            413,
            "request_too_large",
            f"Request body size exceeds allowed limit of {self.max_body_size} bytes.",
        )
    
    def _validate_payload(self, body_json: Any) -> Optional[str]:
        """
        Validate the technology count of a recommendation request.
        
        Args:
            body_json: Parsed JSON body (None if it could not be parsed)
        
        Returns:
            Error message if validation fails, None if valid
        """
        if not isinstance(body_json, dict):
            return None
        
        technologies = body_json.get("technologies")
        if isinstance(technologies, list) and len(technologies) > self.max_technologies:
            return (
                f"Too many technologies: {len(technologies)} "
                f"(limit: {self.max_technologies})"
            )
        return None
