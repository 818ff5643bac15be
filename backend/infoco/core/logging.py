from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import Request, Response
from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware

from infoco.core.security import decode_token

# Attributes copied from ``extra=`` into the JSON line when present.
_EXTRA_FIELDS = ("request_id", "principal", "session", "path", "method", "status_code", "latency_ms")

# Covered by RequestLoggingMiddleware and the Gemini client's own log lines.
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({key: getattr(record, key) for key in _EXTRA_FIELDS if hasattr(record, key)})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _token_identity(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """Email and shortened session id from the bearer token, if it decodes."""
    scheme, _, token = (request.headers.get("authorization") or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None, None
    try:
        claims = decode_token(token.strip())
    except JWTError:
        return None, None
    sid = claims.get("sid")
    return claims.get("email"), (str(sid)[:8] if sid else None)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One JSON line per request; 401/403 responses are repeated on the security logger."""

    def __init__(self, app, logger_name: str = "request") -> None:
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)
        self.security_logger = logging.getLogger("security")

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        email, session = _token_identity(request)
        fields = {
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "principal": email,
            "session": session,
        }

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            fields["latency_ms"] = round((time.perf_counter() - start) * 1000, 2)
            self.logger.exception("unhandled_exception", extra=fields)
            raise

        fields["status_code"] = response.status_code
        fields["latency_ms"] = round((time.perf_counter() - start) * 1000, 2)
        self.logger.info("request", extra=fields)
        if response.status_code in (401, 403):
            event = "unauthenticated" if response.status_code == 401 else "forbidden"
            self.security_logger.info(event, extra=fields)

        response.headers["X-Request-Id"] = request_id
        return response
