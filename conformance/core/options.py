from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from conformance.core.model.registry import ModelRegistry
from conformance.core.model.resolver import DEFAULT_RESOLVER, FieldResolver
from conformance.core.rules.config import RulesRunConfig

DEFAULT_VALIDATION_MODE = "OpenData"

VALIDATION_MODES = (
    "OpenData",
    "RPDEFeed",
    "C1Request",
    "C1Response",
    "C2Request",
    "C2Response",
    "PRequest",
    "PResponse",
    "BRequest",
    "BResponse",
    "OrderFeed",
)

OA_CONTEXT_URL = "https://openactive.io/"
OFFICIAL_ACTIVITY_LIST = "https://openactive.io/activity-list"


def _env_str(key: str, default: str) -> str:
    v = (os.getenv(key) or "").strip()
    return v or default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except (TypeError, ValueError):
        return default


def default_validation_mode() -> str:
    return _env_str("CONFORMANCE_VALIDATION_MODE", DEFAULT_VALIDATION_MODE)


@dataclass
class ValidationOptions:
    # Root type override; None => taken from the document
    type: Optional[str] = None
    validation_mode: str = field(default_factory=default_validation_mode)
    # Concept schemes: {"id": ..., "concept": [{"id": ..., "prefLabel": ...}]}
    activity_lists: List[Dict[str, Any]] = field(default_factory=list)
    # RPDE feed pages: validate at most this many `updated` items; None => all
    rpde_item_limit: Optional[int] = None
    rules: RulesRunConfig = field(default_factory=RulesRunConfig)
    models: Optional[ModelRegistry] = None
    resolver: FieldResolver = DEFAULT_RESOLVER

    @classmethod
    def from_payload(cls, payload: Any, *, models: Optional[ModelRegistry] = None) -> "ValidationOptions":
        """
        Accepts None or
          {"type": "Event", "validationMode": "RPDEFeed",
           "activityLists": [...], "rpdeItemLimit": 10, "rules": {...}}
        snake_case keys are accepted too.
        """
        if not isinstance(payload, dict):
            return cls(models=models)

        mode = payload.get("validationMode", payload.get("validation_mode"))
        lists = payload.get("activityLists", payload.get("activity_lists"))
        root_type = payload.get("type")
        limit = payload.get("rpdeItemLimit", payload.get("rpde_item_limit"))

        return cls(
            type=root_type if isinstance(root_type, str) and root_type else None,
            validation_mode=mode if isinstance(mode, str) and mode else default_validation_mode(),
            activity_lists=[x for x in lists if isinstance(x, dict)] if isinstance(lists, list) else [],
            rpde_item_limit=limit if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0 else None,
            rules=RulesRunConfig.from_payload(payload.get("rules")),
            models=models,
        )
