"""Error types raised by the job and course services."""
import logging
from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class JobMatchError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {'error': type(self).__name__, 'message': self.message}


class DuplicateFingerprintError(JobMatchError):
    """A job with the same fingerprint is already stored."""

    status_code = 409

    def __init__(self, fingerprint: str, message: str = "Job already exists"):
        super().__init__(message)
        self.fingerprint = fingerprint

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['fingerprint'] = self.fingerprint
        return data


class NotFoundError(JobMatchError):
    """The requested record does not exist."""

    status_code = 404


def register_error_handlers(app: FastAPI) -> None:
    """Map service errors to JSON responses on a FastAPI application."""
    @app.exception_handler(JobMatchError)
    async def handle_job_match_error(request: Request, exc: JobMatchError):
        if exc.status_code >= 500:
            logger.error(f"Unhandled service error on {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
