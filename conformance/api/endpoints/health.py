from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from conformance.core.engine import default_model_registry, default_rule_registry
from conformance.core.observability.metrics import inc_named, snapshot_named

router = APIRouter(tags=["ops"])


@router.get("/health")
def health_check():
    inc_named("health")
    rules = default_rule_registry()
    return {
        "status": "healthy",
        "models": len(default_model_registry()),
        "rules": len(rules.list_rules()),
        "rules_fingerprint": rules.fingerprint,
        "counters": snapshot_named(),
    }


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics() -> Response:
    # validation counters, error counts by severity, duration histogram
    return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
