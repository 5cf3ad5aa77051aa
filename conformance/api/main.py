from __future__ import annotations

from fastapi import FastAPI

from conformance.api.endpoints import catalogue, health, validate
from conformance.api.middleware.error_shaping import SafeErrorMiddleware, conformance_error_handler
from conformance.core.errors import ConformanceError

app = FastAPI(
    title="JSON-LD Conformance Validator API",
    version="0.1.0",
)

# ConformanceErrors are answered by the handler; anything else falls through to SafeErrorMiddleware
app.add_middleware(SafeErrorMiddleware)
app.add_exception_handler(ConformanceError, conformance_error_handler)

app.include_router(health.router)

# ------------------------------------------------------------
# Versioned (authoritative)
# ------------------------------------------------------------
app.include_router(validate.router, prefix="/api/v1")
app.include_router(catalogue.router, prefix="/api/v1")
