from dataclasses import dataclass, field
from typing import Any, Optional


def _names(raw: Any) -> Optional[list[str]]:
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [x for x in raw if isinstance(x, str)]
    return None


@dataclass
class RulesRunConfig:
    """Which catalogue rules take part in one validation run."""

    # None => every rule that is enabled_by_default; a list => allowlist
    enabled: Optional[list[str]] = None
    disabled: list[str] = field(default_factory=list)
    # per-rule settings, keyed by rule name
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "RulesRunConfig":
        """
        Accepts:
          - None
          - ["required_fields", ...]
          - {"enabled": [...], "disabled": [...], "options": {...}}
        `rules` is read as a synonym for `enabled`; a bare string means one rule.
        """
        if isinstance(payload, RulesRunConfig):
            return payload
        if isinstance(payload, list):
            return cls(enabled=_names(payload))
        if not isinstance(payload, dict):
            return cls()

        options = payload.get("options")
        return cls(
            enabled=_names(payload.get("enabled", payload.get("rules"))),
            disabled=_names(payload.get("disabled")) or [],
            options=options if isinstance(options, dict) else {},
        )

    def rule_options(self, rule_name: str) -> dict[str, Any]:
        v = (self.options or {}).get(rule_name)
        return v if isinstance(v, dict) else {}

    def is_enabled_with_default(self, name: str, *, enabled_by_default: bool = True) -> bool:
        if name in (self.disabled or []):
            return False
        if self.enabled is not None:
            return name in self.enabled
        return bool(enabled_by_default)

    def selects(self, rule: Any) -> bool:
        return self.is_enabled_with_default(
            rule.name,
            enabled_by_default=bool(getattr(rule, "enabled_by_default", True)),
        )
