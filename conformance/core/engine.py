from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging
import time
from functools import lru_cache
from typing import Any, Iterable, List, Optional, Tuple, Union

from conformance.core.errors import RuleDefinitionError, ValidationError
from conformance.core.helpers import is_rpde_feed
from conformance.core.model.model_spec import ModelSpec, normalize_type_name
from conformance.core.model.node import MISSING, ModelNode
from conformance.core.model.registry import ModelRegistry
from conformance.core.observability.metrics import observe_validation
from conformance.core.options import ValidationOptions
from conformance.core.rules.contracts import CompiledRule, RawRuleResult, compile_rule
from conformance.core.rules.registry import RuleRegistry

log = logging.getLogger("conformance.engine")

ROOT_NAME = "$"
FEED_PAGE_MODEL = "FeedPage"


async def _resolve(out: Any) -> Any:
    if inspect.isawaitable(out):
        return await out
    return out


class ValidationEngine:
    """
    Pre-order traversal of a JSON-LD document.

    At each node every rule runs in order: its model hook (when the model is
    targeted), then its field hook once per targeted field on the node. Then
    the node's children are visited in document order. Hook results are
    awaited one at a time so the error list is deterministic.
    """

    def __init__(
        self,
        rules: Iterable[Any],
        raw_rules: Iterable[Any] = (),
        models: Optional[ModelRegistry] = None,
        options: Optional[ValidationOptions] = None,
    ):
        self._rules: List[CompiledRule] = [r if isinstance(r, CompiledRule) else compile_rule(r) for r in rules]
        self._raw_rules: List[Any] = list(raw_rules)

        options = options or ValidationOptions()
        if models is not None and options.models is None:
            options = dataclasses.replace(options, models=models)
        self.options = options

    @classmethod
    def from_registry(
        cls,
        registry: RuleRegistry,
        models: Optional[ModelRegistry] = None,
        options: Optional[ValidationOptions] = None,
    ) -> "ValidationEngine":
        options = options or ValidationOptions()
        active = [registry.compiled(r.name) for r in registry.get_active_rules(options.rules)]
        return cls(active, registry.get_active_raw_rules(options.rules), models=models, options=options)

    @property
    def rule_names(self) -> List[str]:
        return [r.name for r in self._rules]

    def validate(self, document: Any) -> List[ValidationError]:
        """Blocking entry point. Use validate_async() inside a running loop."""
        return asyncio.run(self.validate_async(document))

    async def validate_async(self, document: Any) -> List[ValidationError]:
        t0 = time.perf_counter()
        errors: List[ValidationError] = []

        data = document
        for raw_rule in self._raw_rules:
            data = await self._apply_raw_rule(raw_rule, data, errors)

        mode = self.options.validation_mode
        rules = [r for r in self._rules if r.applies_to_mode(mode)]

        for value, index in self._roots(data):
            root = ModelNode(ROOT_NAME, value, None, self._root_model(value), self.options, index)
            await self._visit(root, rules, errors)

        elapsed = time.perf_counter() - t0
        observe_validation(errors, elapsed)
        log.debug(
            "validate mode=%s rules=%s errors=%s ms=%s",
            mode,
            len(rules),
            len(errors),
            int(round(elapsed * 1000)),
        )
        return errors

    # --- internals ---

    async def _apply_raw_rule(self, raw_rule: Any, data: Any, errors: List[ValidationError]) -> Any:
        name = getattr(raw_rule, "name", type(raw_rule).__name__)
        try:
            result = await _resolve(raw_rule.validate_raw(data, self.options))
        except Exception:
            log.exception("raw rule %s failed", name)
            raise

        if result is None:
            return data
        if not isinstance(result, RawRuleResult):
            raise RuleDefinitionError(f"{name}: validate_raw() must return RawRuleResult, got {type(result).__name__}")

        for e in result.errors:
            errors.append(self._stamp(e, name, None))
        return data if result.data is MISSING else result.data

    @staticmethod
    def _roots(data: Any) -> List[Tuple[Any, Optional[int]]]:
        if isinstance(data, dict):
            return [(data, None)]
        if isinstance(data, list):
            return [(v, i) for i, v in enumerate(data) if isinstance(v, dict)]
        return []

    def _root_model(self, value: Any) -> ModelSpec:
        name = self.options.type or value.get("type", value.get("@type"))
        if not isinstance(name, str):
            name = FEED_PAGE_MODEL if is_rpde_feed(value) else None
        models = self.options.models
        if models is None:
            return ModelSpec.unspecified(normalize_type_name(name))
        return models.model_for(name)

    async def _visit(self, node: ModelNode, rules: List[CompiledRule], errors: List[ValidationError]) -> None:
        for rule in rules:
            if rule.targets_model(node.model):
                errors.extend(await self._call(rule, node, rule.model_hook))
            if rule.field_hook is None:
                continue
            for field_name in node.fields():
                if rule.targets_field(node.model, field_name):
                    errors.extend(await self._call(rule, node, rule.field_hook, field_name))

        for child in node.children():
            await self._visit(child, rules, errors)

    async def _call(self, rule: CompiledRule, node: ModelNode, hook: Any, *args: Any) -> List[ValidationError]:
        try:
            out = await _resolve(hook(node, *args))
        except Exception:
            log.exception("rule %s failed at %s", rule.name, node.get_path(*args))
            raise

        if out is None:
            return []
        if not isinstance(out, list):
            raise RuleDefinitionError(f"{rule.name}: hooks must return a list of errors, got {type(out).__name__}")
        return [self._stamp(e, rule.name, node) for e in out]

    @staticmethod
    def _stamp(error: Any, rule_name: str, node: Optional[ModelNode]) -> ValidationError:
        if not isinstance(error, ValidationError):
            raise RuleDefinitionError(f"{rule_name}: returned {type(error).__name__}, expected ValidationError")
        model_type = error.model_type or (node.model.type if node is not None else None)
        return dataclasses.replace(error, model_type=model_type, rule=error.rule or rule_name)


# ------------------------------------------------------------
# Module-level entry points
# ------------------------------------------------------------

@lru_cache(maxsize=1)
def default_rule_registry() -> RuleRegistry:
    return RuleRegistry()


@lru_cache(maxsize=1)
def default_model_registry() -> ModelRegistry:
    return ModelRegistry()


def build_engine(
    options: Union[ValidationOptions, dict, None] = None,
    registry: Optional[RuleRegistry] = None,
) -> ValidationEngine:
    if not isinstance(options, ValidationOptions):
        options = ValidationOptions.from_payload(options)
    if options.models is None:
        options = dataclasses.replace(options, models=default_model_registry())
    return ValidationEngine.from_registry(registry or default_rule_registry(), options=options)


async def validate_async(
    document: Any,
    options: Union[ValidationOptions, dict, None] = None,
    registry: Optional[RuleRegistry] = None,
) -> List[ValidationError]:
    return await build_engine(options, registry).validate_async(document)


def validate(
    document: Any,
    options: Union[ValidationOptions, dict, None] = None,
    registry: Optional[RuleRegistry] = None,
) -> List[ValidationError]:
    return build_engine(options, registry).validate(document)
