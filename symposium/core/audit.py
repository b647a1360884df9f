"""
Audit - HTTP request logging and consultant API interaction records.

Two kinds of audit trail live here:
- AuditMiddleware logs every HTTP request with status and duration.
- AuditRecord / DatabaseAuditSink store one row per consultant pipeline
  run in api_interaction_logs, on the success path and the failure path.
"""
import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from symposium.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class AuditRecord:
    """
    One consultant pipeline run.

    request and response hold already-serialized JSON payloads.
    """
    consultant_id: int
    adapter_type: str
    request: Optional[str]
    response: Optional[str]
    success: bool
    error_message: Optional[str] = None
    elapsed_ms: int = 0
    timestamp: datetime = field(default_factory=datetime.utcnow)


def serialize_payload(payload: Any) -> Optional[str]:
    """JSON-encode an audit payload; None stays None."""
    if payload is None:
        return None
    return json.dumps(payload, default=str, ensure_ascii=False)


class AuditSink(Protocol):
    """Destination for pipeline audit records."""

    def append(self, record: AuditRecord) -> None:
        ...


class DatabaseAuditSink:
    """
    Writes audit records to the api_interaction_logs table.

    Write failures are logged and dropped so that an audit problem never
    changes the outcome of a chat turn.
    """

    def __init__(self, db=None):
        from symposium.database.connection import get_database
        self.db = db if db is not None else get_database()

    def append(self, record: AuditRecord) -> None:
        from symposium.database.models import ApiInteractionLog

        try:
            with self.db.get_session() as session:
                session.add(ApiInteractionLog(
                    consultant_id=record.consultant_id,
                    api_type=record.adapter_type,
                    request_data=record.request,
                    response_data=record.response,
                    success=record.success,
                    error_message=record.error_message,
                    execution_time_ms=record.elapsed_ms,
                    timestamp=record.timestamp,
                ))
        except Exception as e:
            logger.error(
                f"Failed to write audit record for consultant={record.consultant_id}: {e}"
            )


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status code and duration of every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"REQUEST FAILED: {method} {path} "
                f"client={client_ip} duration={duration:.3f}s error={str(e)}"
            )
            raise

        duration = time.time() - start_time
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        if path.startswith("/health"):
            logger.debug(f"HEALTH: {path} status={response.status_code} duration={duration:.3f}s")
            return response

        if response.status_code >= 500:
            log_fn = logger.error
        elif response.status_code >= 400:
            log_fn = logger.warning
        else:
            log_fn = logger.info

        log_fn(
            f"REQUEST: {method} {path} "
            f"status={response.status_code} duration={duration:.3f}s client={client_ip}"
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard security headers to all responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
