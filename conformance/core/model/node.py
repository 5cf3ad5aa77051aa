from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Union

from .field_spec import FieldSpec
from .model_spec import ModelSpec, normalize_type_name
from .resolver import FieldResolver

if TYPE_CHECKING:
    from conformance.core.options import ValidationOptions


class _Missing:
    """Absent value. Distinct from a JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class ModelNode:
    """
    One positioned occurrence of an object in the document, paired with the
    ModelSpec it was resolved to.

    Nodes never own their parent. Children are built on demand for the
    duration of a single validation pass.
    """

    def __init__(
        self,
        name: str,
        value: Any,
        parent_node: Optional["ModelNode"],
        model: ModelSpec,
        options: Optional["ValidationOptions"] = None,
        index: Optional[int] = None,
    ):
        if options is None:
            from conformance.core.options import ValidationOptions
            options = ValidationOptions()
        self.name = name
        self.value = value
        self.parent_node = parent_node
        self.model = model
        self.options = options
        self.index = index
        self.root_node: ModelNode = parent_node.root_node if parent_node is not None else self
        self.inheritance = InheritanceResolver(self)
        self._key_index: Optional[Dict[str, str]] = None

    def __repr__(self) -> str:
        return f"ModelNode(path={self.get_path()!r}, type={self.model.type!r})"

    @property
    def resolver(self) -> FieldResolver:
        return self.options.resolver

    @property
    def key_index(self) -> Dict[str, str]:
        if self._key_index is None:
            if isinstance(self.value, dict):
                self._key_index = self.resolver.index_keys(self.model, self.value)
            else:
                self._key_index = {}
        return self._key_index

    @property
    def introducing_field(self) -> Optional[FieldSpec]:
        """FieldSpec on the parent's model that introduced this node."""
        if self.parent_node is None:
            return None
        return self.resolver.resolve(self.parent_node.model, self.name)

    def fields(self) -> List[str]:
        """Canonical field names present on this node, in document order."""
        return list(self.key_index.keys())

    def canonical(self, field: str) -> str:
        return self.resolver.canonical_name(self.model, field)

    def get_mapped_field_name(self, field: str) -> Optional[str]:
        """Raw key this node actually uses for `field`, if present."""
        return self.key_index.get(self.canonical(field))

    def get_value(self, field: str) -> Any:
        raw_key = self.get_mapped_field_name(field)
        if raw_key is None:
            return MISSING
        return self.value[raw_key]

    def get_mapped_value(self, field: str) -> Any:
        """
        Value stored under the FieldSpec's own declared keys (its name, then
        its `sameAs` IRI), falling back to any other alias of the field.
        """
        if not isinstance(self.value, dict):
            return MISSING
        spec = self.model.get_field(self.canonical(field))
        if spec is not None:
            for key in (spec.field_name, spec.same_as):
                if key is not None and key in self.value:
                    return self.value[key]
        return self.get_value(field)

    def get_value_with_inheritance(self, field: str) -> Any:
        return self.inheritance.resolve(field)

    def has_mapped_field(self, field: str) -> bool:
        return self.get_value(field) is not MISSING

    def get_path(self, *segments: Union[str, int]) -> str:
        parts: List[str] = []
        node: Optional[ModelNode] = self
        while node is not None:
            part = node.name if node.parent_node is None else f".{node.name}"
            if node.index is not None:
                part = f"{part}[{node.index}]"
            parts.append(part)
            node = node.parent_node
        path = "".join(reversed(parts))
        for seg in segments:
            if isinstance(seg, int) and not isinstance(seg, bool):
                path += f"[{seg}]"
            else:
                path += f".{seg}"
        return path

    def _child_model(self, raw_key: str, value: Dict[str, Any]) -> ModelSpec:
        models = self.options.models
        declared = value.get("type", value.get("@type"))
        model: Optional[ModelSpec] = None
        if isinstance(declared, str) and models is not None:
            model = models.get(declared)

        spec = self.resolver.resolve(self.model, raw_key)
        if (model is None or not model.has_specification) and spec is not None and spec.model:
            structural = (
                spec.required_type is None
                and not spec.alternative_types
                and not spec.alternative_models
            )
            if structural and models is not None:
                model = models.get(spec.model) or model

        if model is None:
            name = normalize_type_name(declared) if isinstance(declared, str) else (spec.model_type if spec else None)
            model = ModelSpec.unspecified(name)
        return model

    def child(self, raw_key: str, value: Dict[str, Any], index: Optional[int] = None) -> "ModelNode":
        return ModelNode(
            raw_key,
            value,
            self,
            self._child_model(raw_key, value),
            self.options,
            index,
        )

    def children_for(self, raw_key: str) -> Iterator["ModelNode"]:
        if not isinstance(self.value, dict) or raw_key not in self.value:
            return
        v = self.value[raw_key]
        if isinstance(v, dict):
            if "@value" not in v:
                yield self.child(raw_key, v)
        elif isinstance(v, list):
            for i, element in enumerate(v):
                if isinstance(element, dict) and "@value" not in element:
                    yield self.child(raw_key, element, i)

    def children(self) -> Iterator["ModelNode"]:
        if not isinstance(self.value, dict):
            return
        for raw_key in list(self.value.keys()):
            yield from self.children_for(raw_key)


class InheritanceResolver:
    """
    Resolves a field that is absent on a node from structurally adjacent nodes.

    Upward: the field that introduced this node (e.g. `subEvent` on the parent)
    must permit it through `inheritsTo`. Downward: a field on this node's own
    model (e.g. `superEvent`) must permit it through `inheritsFrom`. Each walk
    keeps its direction.
    """

    def __init__(self, node: ModelNode):
        self.node = node

    def resolve(self, field: str) -> Any:
        field = self.node.canonical(field)
        value = self.node.get_value(field)
        if value is not MISSING:
            return value
        value = self.from_ancestors(field)
        if value is not MISSING:
            return value
        return self.from_descendants(field)

    def from_ancestors(self, field: str) -> Any:
        node = self.node
        while node.parent_node is not None:
            introducing = node.introducing_field
            if introducing is None or not introducing.inherits_to.permits(field):
                return MISSING
            node = node.parent_node
            value = node.get_value(field)
            if value is not MISSING:
                return value
        return MISSING

    def from_descendants(self, field: str) -> Any:
        node = self.node
        for name, spec in node.model.fields.items():
            if not spec.inherits_from.permits(field):
                continue
            raw_key = node.get_mapped_field_name(name)
            if raw_key is None:
                continue
            for child in node.children_for(raw_key):
                value = child.get_value(field)
                if value is MISSING:
                    value = InheritanceResolver(child).from_descendants(field)
                if value is not MISSING:
                    return value
        return MISSING
