from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from conformance.core.errors import ProfileDefinitionError, ValidationErrorType
from conformance.core.model.model_spec import normalize_type_name


class ExclusionMode(str, Enum):
    ANY = "any"
    ALL = "all"


def _suffix_pattern(raw: Any) -> re.Pattern:
    source = raw.pattern if isinstance(raw, re.Pattern) else raw
    if not isinstance(source, str):
        raise ValueError(f"targetPaths entries must be regex strings, got {raw!r}")
    if not source.endswith("$"):
        source = f"(?:{source})$"
    try:
        return re.compile(source)
    except re.error as e:
        raise ValueError(f"invalid targetPaths regex {raw!r}: {e}") from e


class Exclusion(BaseModel):
    """
    Fires when an error of one of `error_type` exists and, if targets are
    given, its path ends with one of `target_paths` or its trailing field is
    listed under `target_fields[<type of the node that reported it>]`.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    error_type: List[ValidationErrorType] = Field(alias="errorType", min_length=1)
    target_paths: Optional[List[re.Pattern]] = Field(default=None, alias="targetPaths")
    target_fields: Optional[Dict[str, List[str]]] = Field(default=None, alias="targetFields")

    @field_validator("error_type", mode="before")
    @classmethod
    def _listify_types(cls, v: Any) -> Any:
        return [v] if isinstance(v, str) else v

    @field_validator("target_paths", mode="before")
    @classmethod
    def _compile_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, (str, re.Pattern)):
            v = [v]
        return [_suffix_pattern(p) for p in v]

    @field_validator("target_fields", mode="before")
    @classmethod
    def _normalize_fields(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {
            normalize_type_name(str(k)): ([names] if isinstance(names, str) else names)
            for k, names in v.items()
        }

    @property
    def is_untargeted(self) -> bool:
        # an empty list is a target that matches nothing, not a missing one
        return self.target_paths is None and self.target_fields is None


class Measure(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: Optional[str] = None
    exclusion_mode: ExclusionMode = Field(default=ExclusionMode.ANY, alias="exclusionMode")
    exclusions: List[Exclusion] = Field(default_factory=list)

    @field_validator("exclusion_mode", mode="before")
    @classmethod
    def _mode(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    identifier: str
    measures: List[Measure] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Profile":
        if not isinstance(data, dict):
            raise ProfileDefinitionError(f"Profile must be an object, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ProfileDefinitionError(f"Invalid profile {data.get('identifier')!r}: {e}") from e


class ProfileScore(BaseModel):
    profile: str
    measure_results: Dict[str, int] = Field(default_factory=dict)
    overall_score: float = 1.0
