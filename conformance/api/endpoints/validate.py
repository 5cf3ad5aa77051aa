from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from conformance.core.engine import default_model_registry, validate_async
from conformance.core.measures import ExclusionMatcher, Profile, default_profile_registry
from conformance.core.options import ValidationOptions

router = APIRouter(tags=["validate"])


class ValidateRequest(BaseModel):
    document: Any = None
    options: Optional[Dict[str, Any]] = None

    # Profile identifiers from the registry, or inline profile definitions
    profiles: Optional[List[Union[str, Dict[str, Any]]]] = Field(default=None)


def _resolve_profiles(raw: List[Union[str, Dict[str, Any]]]) -> List[Profile]:
    reg = default_profile_registry()
    out: List[Profile] = []
    for item in raw:
        if isinstance(item, dict):
            out.append(Profile.from_dict(item))
            continue
        profile = reg.get(item)
        if profile is None:
            raise HTTPException(status_code=404, detail=f"Profile not found: {item}")
        out.append(profile)
    return out


@router.post("/validate")
async def validate_document(req: ValidateRequest):
    options = ValidationOptions.from_payload(req.options, models=default_model_registry())
    profiles = _resolve_profiles(req.profiles) if req.profiles else []

    errors = await validate_async(req.document, options)

    body: Dict[str, Any] = {"errors": [e.to_dict() for e in errors]}
    if profiles:
        body["profiles"] = {
            p.identifier: ExclusionMatcher.compute_score(errors, p).model_dump() for p in profiles
        }
    return body
