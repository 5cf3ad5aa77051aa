from .config import RulesRunConfig
from .contracts import (
    NOTHING,
    WILDCARD,
    BaseRawRule,
    BaseRule,
    CompiledRule,
    FlatSet,
    PerModel,
    RawRule,
    RawRuleResult,
    Rule,
    RuleMeta,
    RuleTarget,
    RuleTest,
    Wildcard,
    compile_rule,
    normalize_target,
    render_template,
)
from .registry import RuleInfo, RuleRegistry, default_rules_dir

__all__ = [
    "RulesRunConfig",
    "NOTHING",
    "WILDCARD",
    "BaseRawRule",
    "BaseRule",
    "CompiledRule",
    "FlatSet",
    "PerModel",
    "RawRule",
    "RawRuleResult",
    "Rule",
    "RuleMeta",
    "RuleTarget",
    "RuleTest",
    "Wildcard",
    "compile_rule",
    "normalize_target",
    "render_template",
    "RuleInfo",
    "RuleRegistry",
    "default_rules_dir",
]
