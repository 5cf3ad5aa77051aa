from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional

from .field_spec import FieldSpec, URL
from .model_spec import ModelSpec


DEFAULT_NAMESPACES: Dict[str, str] = {
    "schema": "https://schema.org/",
    "oa": "https://openactive.io/",
    "skos": "http://www.w3.org/2004/02/skos/core#",
    "beta": "https://openactive.io/ns-beta#",
    "ext": "https://openactive.io/ns-ext#",
    "pending": "https://pending.schema.org/",
    "dc": "http://purl.org/dc/terms/",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "owl": "http://www.w3.org/2002/07/owl#",
}

# JSON-LD keyword -> canonical field name
KEYWORD_ALIASES: Dict[str, str] = {
    "@id": "id",
    "@type": "type",
    "@context": "@context",
}

KEYWORD_FIELDS: Dict[str, FieldSpec] = {
    "id": FieldSpec(fieldName="id", requiredType=URL),
    "type": FieldSpec(fieldName="type", requiredType="https://schema.org/Text"),
    "@context": FieldSpec(
        fieldName="@context",
        requiredType=URL,
        alternativeTypes=[f"ArrayOf#{URL}"],
    ),
}

KeyKind = Literal["plain", "keyword", "prefixed", "iri"]


class FieldResolver:
    """
    Maps raw JSON keys to canonical field names.

    Order: JSON-LD keywords, exact field name, `prefix:local` with a known
    prefix, a FieldSpec `sameAs` IRI, then a known namespace IRI + local part.
    Anything else is its own canonical name.
    """

    def __init__(self, namespaces: Optional[Mapping[str, str]] = None):
        self.namespaces: Dict[str, str] = dict(DEFAULT_NAMESPACES if namespaces is None else namespaces)
        # longest IRI first so nested namespaces win
        self._iris = sorted(self.namespaces.items(), key=lambda kv: len(kv[1]), reverse=True)

    def split_prefixed(self, raw_key: str) -> Optional[tuple]:
        if "://" in raw_key or ":" not in raw_key:
            return None
        prefix, local = raw_key.split(":", 1)
        if prefix in self.namespaces and local:
            return prefix, local
        return None

    def split_iri(self, raw_key: str) -> Optional[tuple]:
        if "://" not in raw_key:
            return None
        for prefix, iri in self._iris:
            if raw_key.startswith(iri) and len(raw_key) > len(iri):
                return prefix, raw_key[len(iri):]
        return None

    def key_kind(self, raw_key: str) -> KeyKind:
        if raw_key in KEYWORD_ALIASES:
            return "keyword"
        if self.split_prefixed(raw_key) is not None:
            return "prefixed"
        if "://" in raw_key:
            return "iri"
        return "plain"

    def canonical_name(self, model: Optional[ModelSpec], raw_key: str) -> str:
        if raw_key in KEYWORD_ALIASES:
            return KEYWORD_ALIASES[raw_key]
        fields = model.fields if model is not None else {}
        if raw_key in fields:
            return raw_key

        prefixed = self.split_prefixed(raw_key)
        if prefixed is not None:
            return prefixed[1]

        if "://" in raw_key:
            for name, spec in fields.items():
                if spec.same_as and spec.same_as == raw_key:
                    return spec.field_name or name
            by_iri = self.split_iri(raw_key)
            if by_iri is not None:
                return by_iri[1]
        return raw_key

    def get_mapped_field_name(self, model: Optional[ModelSpec], raw_key: str) -> str:
        return self.canonical_name(model, raw_key)

    def resolve(self, model: Optional[ModelSpec], raw_key: str) -> Optional[FieldSpec]:
        name = self.canonical_name(model, raw_key)
        if model is not None and name in model.fields:
            return model.fields[name]
        return KEYWORD_FIELDS.get(name)

    def has_mapped_field(self, model: Optional[ModelSpec], raw_key: str) -> bool:
        return self.resolve(model, raw_key) is not None

    def index_keys(self, model: Optional[ModelSpec], data: Mapping[str, Any]) -> Dict[str, str]:
        """
        canonical name -> raw key actually used for it on `data`.

        When several raw keys collapse onto one canonical name the unprefixed
        form wins, then the first key encountered in document order.
        """
        index: Dict[str, str] = {}
        for raw_key in data.keys():
            if not isinstance(raw_key, str):
                continue
            name = self.canonical_name(model, raw_key)
            current = index.get(name)
            if current is None:
                index[name] = raw_key
            elif raw_key == name and current != name:
                index[name] = raw_key
        return index

    def keys_for(self, model: Optional[ModelSpec], field: str, data: Mapping[str, Any]) -> List[str]:
        """Every raw key on `data` that resolves to `field`, in document order."""
        return [k for k in data.keys() if isinstance(k, str) and self.canonical_name(model, k) == field]


DEFAULT_RESOLVER = FieldResolver()
