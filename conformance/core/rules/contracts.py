from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field

from conformance.core.errors import (
    RuleDefinitionError,
    TemplateRenderError,
    UnknownTestKeyError,
    ValidationError,
    ValidationErrorCategory,
    ValidationErrorSeverity,
    ValidationErrorType,
    default_message,
)
from conformance.core.model.model_spec import ModelSpec, normalize_type_name
from conformance.core.model.node import MISSING


class RuleTest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str = ""
    category: ValidationErrorCategory
    severity: ValidationErrorSeverity
    type: ValidationErrorType
    description: Optional[str] = None
    sample_values: Dict[str, Any] = Field(default_factory=dict, alias="sampleValues")


class RuleMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    tests: Dict[str, RuleTest] = Field(default_factory=dict)


# ------------------------------------------------------------
# Targets: normalized once, matched many times
# ------------------------------------------------------------

@dataclass(frozen=True)
class Wildcard:
    def matches_model(self, lineage: Iterable[str]) -> bool:
        return True

    def matches_field(self, lineage: Iterable[str], field_name: str) -> bool:
        return True

    def to_raw(self) -> Any:
        return "*"


@dataclass(frozen=True)
class FlatSet:
    names: FrozenSet[str] = frozenset()

    def matches_model(self, lineage: Iterable[str]) -> bool:
        return any(t in self.names for t in lineage)

    def matches_field(self, lineage: Iterable[str], field_name: str) -> bool:
        return field_name in self.names

    def to_raw(self) -> Any:
        return sorted(self.names)


@dataclass(frozen=True)
class PerModel:
    # type -> field names; None means every field of that type
    fields: Mapping[str, Optional[FrozenSet[str]]] = field(default_factory=dict, hash=False)

    def matches_model(self, lineage: Iterable[str]) -> bool:
        return any(t in self.fields for t in lineage)

    def matches_field(self, lineage: Iterable[str], field_name: str) -> bool:
        for t in lineage:
            if t not in self.fields:
                continue
            names = self.fields[t]
            if names is None or field_name in names:
                return True
        return False

    def to_raw(self) -> Any:
        return {t: ("*" if v is None else sorted(v)) for t, v in self.fields.items()}


RuleTarget = Union[Wildcard, FlatSet, PerModel]

WILDCARD = Wildcard()
NOTHING = FlatSet()


def _names(raw: Any, *, owner: str, kind: str) -> FrozenSet[str]:
    if isinstance(raw, str):
        return frozenset([raw])
    if isinstance(raw, (list, tuple, set, frozenset)) and all(isinstance(x, str) for x in raw):
        return frozenset(raw)
    raise RuleDefinitionError(f"{owner}: unsupported {kind} entry {raw!r}")


def normalize_target(raw: Any, *, allow_per_model: bool = True, owner: str = "rule", kind: str = "target") -> RuleTarget:
    """'*' | name | [names] | {Type: '*' | name | [names]} -> RuleTarget."""
    if isinstance(raw, (Wildcard, FlatSet, PerModel)):
        return raw
    if raw is None:
        return NOTHING
    if raw == "*":
        return WILDCARD
    if isinstance(raw, dict):
        if not allow_per_model:
            raise RuleDefinitionError(f"{owner}: {kind} does not accept a per-model map")
        out: Dict[str, Optional[FrozenSet[str]]] = {}
        for type_name, names in raw.items():
            key = normalize_type_name(str(type_name))
            out[key] = None if names == "*" else _names(names, owner=owner, kind=kind)
        return PerModel(fields=out)
    return FlatSet(names=_names(raw, owner=owner, kind=kind))


# ------------------------------------------------------------
# Templates
# ------------------------------------------------------------

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


def _fmt(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if v is None:
        return "null"
    if isinstance(v, (list, tuple)):
        return ", ".join(_fmt(x) for x in v)
    return str(v)


def render_template(template: str, params: Optional[Mapping[str, Any]], value_context: Mapping[str, Any]) -> str:
    params = params or {}

    def _sub(m: re.Match) -> str:
        name = m.group(1)
        if name in params:
            return _fmt(params[name])
        if name == "value" and value_context.get("value", MISSING) is not MISSING:
            return _fmt(value_context["value"])
        raise TemplateRenderError(f"No value for placeholder {{{{{name}}}}} in {template!r}")

    return _PLACEHOLDER.sub(_sub, template)


# ------------------------------------------------------------
# Contracts
# ------------------------------------------------------------

class Rule(Protocol):
    name: str
    meta: RuleMeta
    target_models: Any
    target_fields: Any


class RawRule(Protocol):
    name: str

    def validate_raw(self, data: Any, options: Any) -> "RawRuleResult":
        ...


@dataclass
class RawRuleResult:
    errors: List[ValidationError] = field(default_factory=list)
    # MISSING => keep the document as-is
    data: Any = MISSING


@dataclass
class RuleBase:
    name: str = ""
    version: str = "0.1.0"
    enabled_by_default: bool = True
    priority: int = 100

    meta: ClassVar[Any] = None

    def __post_init__(self) -> None:
        meta = type(self).meta
        if isinstance(meta, dict):
            meta = RuleMeta.model_validate(meta)
        if not isinstance(meta, RuleMeta):
            raise RuleDefinitionError(f"{type(self).__name__} must declare meta")
        self.meta = meta
        if not self.name:
            self.name = meta.name

    def create_error(
        self,
        test_key: str,
        value_context: Optional[Mapping[str, Any]] = None,
        template_params: Optional[Mapping[str, Any]] = None,
    ) -> ValidationError:
        test = self.meta.tests.get(test_key)
        if test is None:
            raise UnknownTestKeyError(self.name, test_key)

        ctx = value_context or {}
        if "path" not in ctx:
            raise RuleDefinitionError(f"{self.name}.{test_key}: value context has no path")

        message = render_template(test.message, template_params, ctx) if test.message else default_message(test.type)
        value = ctx.get("value")
        return ValidationError(
            category=test.category,
            type=test.type,
            severity=test.severity,
            message=message,
            path=ctx["path"],
            value=None if value is MISSING else value,
            rule=self.name,
        )


@dataclass
class BaseRule(RuleBase):
    """
    Convenience base for node rules.

    Subclasses set `meta`, `target_models`, `target_fields` and optionally
    `target_validation_modes` as class attributes, and implement
    `validate_model(node)` and/or `validate_field(node, field)`.
    """

    target_models: ClassVar[Any] = ()
    target_fields: ClassVar[Any] = ()
    target_validation_modes: ClassVar[Any] = "*"

    def __post_init__(self) -> None:
        super().__post_init__()
        cls = type(self)
        self.model_target = normalize_target(cls.target_models, allow_per_model=False, owner=self.name, kind="target_models")
        self.field_target = normalize_target(cls.target_fields, owner=self.name, kind="target_fields")
        self.mode_target = normalize_target(
            cls.target_validation_modes, allow_per_model=False, owner=self.name, kind="target_validation_modes"
        )

    def is_model_targeted(self, model: ModelSpec) -> bool:
        return self.model_target.matches_model(model.lineage)

    def is_field_targeted(self, model: ModelSpec, field_name: str) -> bool:
        return self.field_target.matches_field(model.lineage, field_name)

    def is_validation_mode_targeted(self, mode: str) -> bool:
        return self.mode_target.matches_model((mode,))


@dataclass
class BaseRawRule(RuleBase):
    def validate_raw(self, data: Any, options: Any) -> RawRuleResult:
        raise NotImplementedError


# ------------------------------------------------------------
# Dispatch view
# ------------------------------------------------------------

@dataclass(frozen=True)
class CompiledRule:
    """A rule plus its normalized targets and the hooks it actually has."""
    rule: Any
    name: str
    model_target: RuleTarget
    field_target: RuleTarget
    mode_target: RuleTarget
    model_hook: Optional[Any] = None
    field_hook: Optional[Any] = None

    def applies_to_mode(self, mode: str) -> bool:
        return self.mode_target.matches_model((mode,))

    def targets_model(self, model: ModelSpec) -> bool:
        return self.model_hook is not None and self.model_target.matches_model(model.lineage)

    def targets_field(self, model: ModelSpec, field_name: str) -> bool:
        return self.field_hook is not None and self.field_target.matches_field(model.lineage, field_name)


def _hook(rule: Any, attr: str) -> Optional[Any]:
    fn = getattr(rule, attr, None)
    return fn if callable(fn) else None


def compile_rule(rule: Any) -> CompiledRule:
    name = getattr(rule, "name", None) or type(rule).__name__
    model_target = getattr(rule, "model_target", None) or normalize_target(
        getattr(rule, "target_models", None), allow_per_model=False, owner=name, kind="target_models"
    )
    field_target = getattr(rule, "field_target", None) or normalize_target(
        getattr(rule, "target_fields", None), owner=name, kind="target_fields"
    )
    mode_target = getattr(rule, "mode_target", None) or normalize_target(
        getattr(rule, "target_validation_modes", "*"), allow_per_model=False, owner=name, kind="target_validation_modes"
    )

    model_hook = _hook(rule, "validate_model")
    field_hook = _hook(rule, "validate_field")
    if model_hook is None and field_hook is None:
        raise RuleDefinitionError(f"{name}: rule must implement validate_model() and/or validate_field()")

    return CompiledRule(
        rule=rule,
        name=name,
        model_target=model_target,
        field_target=field_target,
        mode_target=mode_target,
        model_hook=model_hook,
        field_hook=field_hook,
    )
