"""
backend/bettracker/middleware/logging.py

Purpose:
    Request logging for the stats service: one JSON line per request, keyed
    by a short request id that is echoed back in X-Request-ID. A well-formed
    X-Request-ID sent by the caller is reused so a request can be followed
    from the client into these logs.

Dependencies:
    - starlette
    - bettracker.config
"""

import hashlib
import json
import logging
import re
import time
import uuid
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from bettracker.config import settings

logger = logging.getLogger("bettracker.http")

REQUEST_ID_HEADER = "X-Request-ID"
_INBOUND_ID = re.compile(r"^[A-Za-z0-9-]{8,64}$")


def request_id_for(request: Request) -> str:
    inbound = request.headers.get(REQUEST_ID_HEADER, "")
    if _INBOUND_ID.match(inbound):
        return inbound
    return uuid.uuid4().hex[:8]


def _client_fingerprint(request: Request) -> Optional[str]:
    """Truncated sha256 of the client address; raw IPs are never logged."""
    if request.client is None:
        return None
    return hashlib.sha256((request.client.host or "").encode()).hexdigest()[:12]


def _record(request: Request, request_id: str, status: int, started: float) -> dict[str, Any]:
    return {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "status": status,
        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        "client_ip_hash": _client_fingerprint(request),
    }


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request_id_for(request)
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.error(json.dumps(_record(request, request_id, 500, started)))
            raise

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, json.dumps(_record(request, request_id, response.status_code, started)))
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def setup_logging(level: Optional[str] = None) -> None:
    """Root logging config; `level` overrides settings.LOG_LEVEL."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
