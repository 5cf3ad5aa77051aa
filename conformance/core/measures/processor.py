from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence

from conformance.core.errors import ValidationError
from conformance.core.model.model_spec import normalize_type_name
from conformance.core.model.resolver import DEFAULT_RESOLVER

from .models import Exclusion, ExclusionMode, Measure, Profile, ProfileScore

_TRAILING_INDEX = re.compile(r"(\[\d+\])+$")
_NAMESPACE_IRIS = sorted(DEFAULT_RESOLVER.namespaces.values(), key=len, reverse=True)


class ExclusionMatcher:
    """
    Turns a finished error list into per-measure pass (1) / fail (0) results.

    A measure passes unless its exclusions discount it: in ANY mode one firing
    exclusion is enough, in ALL mode every exclusion must fire (so a measure
    with no exclusions is discounted in ALL mode and never in ANY mode).
    """

    @staticmethod
    def trailing_field(path: str) -> Optional[str]:
        """Canonical name of the last field in `path`, array indexes dropped."""
        stripped = _TRAILING_INDEX.sub("", path or "")
        # namespace IRIs used as keys carry dots of their own
        for iri in _NAMESPACE_IRIS:
            stripped = stripped.replace(f".{iri}", ".")
        if "." not in stripped:
            return None
        name = stripped.rsplit(".", 1)[1]
        return DEFAULT_RESOLVER.canonical_name(None, name) if name else None

    @classmethod
    def matches_target_fields(cls, target_fields: Dict[str, List[str]], error: ValidationError) -> bool:
        name = cls.trailing_field(error.path)
        model_type = normalize_type_name(error.model_type)
        if name is None or model_type is None:
            return False
        return name in target_fields.get(model_type, ())

    @classmethod
    def error_matches(cls, error: ValidationError, exclusion: Exclusion) -> bool:
        if error.type not in exclusion.error_type:
            return False
        if exclusion.is_untargeted:
            return True
        if exclusion.target_fields and cls.matches_target_fields(exclusion.target_fields, error):
            return True
        if exclusion.target_paths and any(p.search(error.path) for p in exclusion.target_paths):
            return True
        return False

    @classmethod
    def exclusion_fires(cls, errors: Sequence[ValidationError], exclusion: Exclusion) -> bool:
        return any(cls.error_matches(e, exclusion) for e in errors)

    @classmethod
    def is_discounted(cls, errors: Sequence[ValidationError], measure: Measure) -> bool:
        fired = [x for x in measure.exclusions if cls.exclusion_fires(errors, x)]
        if measure.exclusion_mode == ExclusionMode.ALL:
            return len(fired) == len(measure.exclusions)
        return len(fired) > 0

    @classmethod
    def compute_score(cls, errors: Iterable[ValidationError], profile: Profile) -> ProfileScore:
        errors = list(errors)
        results: Dict[str, int] = {}
        for measure in profile.measures:
            results[measure.name] = 0 if cls.is_discounted(errors, measure) else 1

        overall = (sum(results.values()) / len(results)) if results else 1.0
        return ProfileScore(profile=profile.identifier, measure_results=results, overall_score=overall)

    @classmethod
    def calculate_measures(
        cls,
        errors: Iterable[ValidationError],
        profiles: Iterable[Profile],
    ) -> Dict[str, Dict[str, int]]:
        errors = list(errors)
        return {p.identifier: cls.compute_score(errors, p).measure_results for p in profiles}
