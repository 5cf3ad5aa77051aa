from __future__ import annotations

import hashlib
import importlib.util
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Optional

from conformance.core.errors import RuleDefinitionError

from .config import RulesRunConfig
from .contracts import CompiledRule, compile_rule

log = logging.getLogger("conformance.rules")

PACKAGED_RULES_DIR = Path(__file__).resolve().parents[2] / "plugins" / "rules"


def default_rules_dir() -> Path:
    env = (os.getenv("CONFORMANCE_RULES_DIR") or "").strip()
    return Path(env) if env else PACKAGED_RULES_DIR


@dataclass(frozen=True)
class RuleInfo:
    name: str
    file: str
    kind: str   # "node" | "raw"
    description: str
    enabled_by_default: bool


def _order(rule: Any) -> tuple:
    return (getattr(rule, "priority", 100), rule.name)


class RuleRegistry:
    """
    Discovers rule modules under `rules_dir`.

    Each `*.py` file (files starting with `_` are skipped) must define `RULE`
    (node rule) or `RAW_RULE` (raw document rule).
    """

    def __init__(self, rules_dir: Optional[str | Path] = None, *, load: bool = True):
        self._rules_dir = Path(rules_dir) if rules_dir is not None else default_rules_dir()
        self._rules: Dict[str, Any] = {}
        self._raw_rules: Dict[str, Any] = {}
        self._compiled: Dict[str, CompiledRule] = {}
        self._rule_files: Dict[str, Path] = {}
        self._fingerprint: Optional[str] = None
        if load:
            self.load_all()

    @property
    def rules_dir(self) -> Path:
        return self._rules_dir

    @property
    def fingerprint(self) -> str:
        if self._fingerprint is None:
            self._fingerprint = self._compute_fingerprint()
        return self._fingerprint

    def reload(self) -> None:
        self._rules.clear()
        self._raw_rules.clear()
        self._compiled.clear()
        self._rule_files.clear()
        self._fingerprint = None
        self.load_all()

    def load_all(self) -> None:
        if not self._rules_dir.exists():
            raise RuleDefinitionError(f"Rules directory not found: {self._rules_dir}")

        for py in sorted(self._rules_dir.glob("*.py")):
            if py.name.startswith("_"):
                continue
            self._load_rule_from_file(py)

        log.debug(
            "rules.load dir=%s rules=%s raw_rules=%s fingerprint=%s",
            self._rules_dir,
            len(self._rules),
            len(self._raw_rules),
            self.fingerprint,
        )

    def add(self, rule: Any, *, file: Optional[Path] = None) -> None:
        name = getattr(rule, "name", None)
        if not isinstance(name, str) or not name:
            raise RuleDefinitionError(f"{file.name if file else rule!r}: rule must have a 'name'")
        if name in self._rules or name in self._raw_rules:
            raise RuleDefinitionError(f"Duplicate rule name: {name} ({file})")

        if callable(getattr(rule, "validate_raw", None)):
            self._raw_rules[name] = rule
        else:
            self._compiled[name] = compile_rule(rule)
            self._rules[name] = rule
        if file is not None:
            self._rule_files[name] = file

    def list_rules(self) -> List[RuleInfo]:
        out: List[RuleInfo] = []
        for name in sorted(list(self._rules.keys()) + list(self._raw_rules.keys())):
            rule = self._rules.get(name) or self._raw_rules[name]
            meta = getattr(rule, "meta", None)
            out.append(
                RuleInfo(
                    name=name,
                    file=str(self._rule_files.get(name, "")),
                    kind="raw" if name in self._raw_rules else "node",
                    description=getattr(meta, "description", "") or "",
                    enabled_by_default=bool(getattr(rule, "enabled_by_default", True)),
                )
            )
        return out

    def get(self, name: str):
        return self._rules.get(name) or self._raw_rules.get(name)

    def get_active_rules(self, cfg: Optional[RulesRunConfig] = None) -> List[Any]:
        cfg = cfg or RulesRunConfig()
        return sorted((r for r in self._rules.values() if cfg.selects(r)), key=_order)

    def get_active_raw_rules(self, cfg: Optional[RulesRunConfig] = None) -> List[Any]:
        cfg = cfg or RulesRunConfig()
        return sorted((r for r in self._raw_rules.values() if cfg.selects(r)), key=_order)

    def compiled(self, name: str) -> Optional[CompiledRule]:
        return self._compiled.get(name)

    # --- internals ---

    def _compute_fingerprint(self) -> str:
        h = hashlib.sha256()
        for py in sorted(self._rules_dir.glob("*.py")):
            if py.name.startswith("_"):
                continue
            h.update(py.name.encode("utf-8"))
            h.update(b"\0")
            h.update(py.read_bytes())
            h.update(b"\0")
        return h.hexdigest()[:16]

    def _load_module(self, *, file_path: Path, module_qualname: str) -> ModuleType:
        spec = importlib.util.spec_from_file_location(module_qualname, str(file_path))
        if spec is None or spec.loader is None:
            raise RuleDefinitionError(f"Cannot load spec for {module_qualname} from {file_path}")

        module = importlib.util.module_from_spec(spec)

        # register before exec so dataclasses can resolve the module
        sys.modules[module_qualname] = module
        spec.loader.exec_module(module)
        return module

    def _load_rule_from_file(self, file_path: Path) -> None:
        module_name = f"conformance.plugins.rules._runtime.{file_path.stem}"
        module = self._load_module(file_path=file_path, module_qualname=module_name)

        found = False
        for sym in ("RULE", "RAW_RULE"):
            if hasattr(module, sym):
                self.add(getattr(module, sym), file=file_path)
                found = True

        if not found:
            raise RuleDefinitionError(f"{file_path.name} must define RULE (or RAW_RULE)")
