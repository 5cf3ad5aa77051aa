from .field_spec import FieldSpec, InheritancePolicy
from .model_spec import ModelSpec, RequiredOption, normalize_type_name
from .resolver import DEFAULT_NAMESPACES, DEFAULT_RESOLVER, FieldResolver
from .node import MISSING, InheritanceResolver, ModelNode
from .registry import ModelRegistry

__all__ = [
    "FieldSpec",
    "InheritancePolicy",
    "ModelSpec",
    "RequiredOption",
    "normalize_type_name",
    "DEFAULT_NAMESPACES",
    "DEFAULT_RESOLVER",
    "FieldResolver",
    "MISSING",
    "InheritanceResolver",
    "ModelNode",
    "ModelRegistry",
]
