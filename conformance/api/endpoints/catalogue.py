from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

from fastapi import APIRouter, HTTPException

from conformance.core.engine import default_rule_registry
from conformance.core.measures import default_profile_registry

router = APIRouter(tags=["catalogue"])


@router.get("/profiles")
def list_profiles():
    reg = default_profile_registry()
    return {
        "profiles": [
            {"identifier": p.identifier, "name": p.name, "measures": [m.name for m in p.measures]}
            for p in reg.list_profiles()
        ],
    }


@router.get("/profiles/{identifier}")
def get_profile(identifier: str):
    reg = default_profile_registry()
    profile = reg.get(identifier)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile.model_dump(mode="json", by_alias=True)


@router.get("/rules")
def list_rules():
    reg = default_rule_registry()
    rules = []
    for info in reg.list_rules():
        item = asdict(info)
        # Only the file name: never expose server paths
        item["file"] = Path(info.file).name if info.file else ""
        rules.append(item)
    return {"fingerprint": reg.fingerprint, "rules": rules}
