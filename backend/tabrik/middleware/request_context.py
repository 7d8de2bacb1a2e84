"""
Tabrik Backend — Request Context Middleware
=============================================

What:  Tags every request with an ID and writes one access-log line for it.
How:   The ID comes from the client's X-Request-ID header or is generated,
       lives in a ContextVar for the exception handlers, and is echoed back.
       The access line names the collection an /api request touched and the
       MongoDB state at that moment, so failures in degraded mode are easy
       to tell apart from store errors.
When:  Outermost application middleware.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("tabrik.access")


def collection_for(path: str) -> Optional[str]:
    """`/api/orders/<id>` → `orders`; None outside the API."""
    parts = path.strip("/").split("/")
    if len(parts) >= 2 and parts[0] == "api":
        return parts[1]
    return None


def database_status(request: Request) -> str:
    connector = getattr(request.app.state, "mongo", None)
    return connector.status if connector is not None else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    API requests log at INFO (WARNING for 4xx, ERROR for 5xx). Frontend
    assets log at DEBUG unless they fail. /health is never logged.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_var.set(rid)

        path = request.url.path
        started = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid

        if path != "/health":
            self._log(request, response.status_code, time.perf_counter() - started, rid)
        return response

    @staticmethod
    def _log(request: Request, status: int, elapsed: float, rid: str) -> None:
        path = request.url.path
        collection = collection_for(path)

        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        elif collection is None:
            level = logging.DEBUG
        else:
            level = logging.INFO

        mongodb = database_status(request)
        duration_ms = round(elapsed * 1000, 2)
        access_logger.log(
            level,
            "%s %s → %d in %.1fms (collection=%s, mongodb=%s) [%s]",
            request.method,
            path,
            status,
            duration_ms,
            collection or "-",
            mongodb,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": duration_ms,
                "collection": collection,
                "mongodb": mongodb,
            },
        )
