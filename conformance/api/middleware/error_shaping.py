from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from conformance.core.errors import ConformanceError

log = logging.getLogger("conformance.errors")

REQUEST_ID_HEADER = "x-request-id"


def _body(detail: str, request_id: Optional[str], **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"detail": detail, **extra}
    if request_id:
        body["request_id"] = request_id
    return body


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """Turns anything a route failed to handle into a bare 500.

    The traceback goes to the `conformance.errors` log only; the client sees
    a fixed message plus its own request id, if it sent one.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception:
            rid = request.headers.get(REQUEST_ID_HEADER)
            log.exception("unhandled error rid=%s method=%s path=%s", rid, request.method, request.url.path)
            return JSONResponse(status_code=500, content=_body("Internal Server Error", rid))


async def conformance_error_handler(request: Request, exc: ConformanceError) -> JSONResponse:
    # bad model, rule or profile definitions: the message is safe, the trace is not
    log.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content=_body(str(exc), request.headers.get(REQUEST_ID_HEADER), error=type(exc).__name__),
    )
