from __future__ import annotations


class ConformanceError(Exception):
    """Base class for engine and configuration defects. Never a data error."""


class ModelSpecError(ConformanceError):
    pass


class RuleDefinitionError(ConformanceError):
    pass


class UnknownTestKeyError(RuleDefinitionError):
    def __init__(self, rule: str, test_key: str):
        super().__init__(f"Rule {rule!r} has no test {test_key!r}")
        self.rule = rule
        self.test_key = test_key


class TemplateRenderError(RuleDefinitionError):
    pass


class ProfileDefinitionError(ConformanceError):
    pass
