from .models import (
    ValidationError,
    ValidationErrorCategory,
    ValidationErrorSeverity,
    ValidationErrorType,
    default_message,
)
from .exceptions import (
    ConformanceError,
    ModelSpecError,
    ProfileDefinitionError,
    RuleDefinitionError,
    TemplateRenderError,
    UnknownTestKeyError,
)

__all__ = [
    "ValidationError",
    "ValidationErrorCategory",
    "ValidationErrorSeverity",
    "ValidationErrorType",
    "default_message",
    "ConformanceError",
    "ModelSpecError",
    "ProfileDefinitionError",
    "RuleDefinitionError",
    "TemplateRenderError",
    "UnknownTestKeyError",
]
