from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from conformance.core.errors import ModelSpecError

from .model_spec import ModelSpec, normalize_type_name

log = logging.getLogger("conformance.models")

PACKAGED_MODELS_DIR = Path(__file__).resolve().parents[2] / "data" / "models"


def default_models_dir() -> Path:
    env = (os.getenv("CONFORMANCE_MODELS_DIR") or "").strip()
    return Path(env) if env else PACKAGED_MODELS_DIR


class ModelRegistry:
    """Loads ModelSpecs once and shares them read-only.

    Resolution order:
      1) models passed explicitly
      2) *.json files under models_dir (CONFORMANCE_MODELS_DIR or packaged data)

    A model file that is not valid JSON or not a valid ModelSpec is a
    configuration defect and raises ModelSpecError.
    """

    def __init__(
        self,
        models_dir: Optional[Path | str] = None,
        *,
        models: Optional[Iterable[ModelSpec]] = None,
        load_files: bool = True,
    ):
        self.models_dir = Path(models_dir) if models_dir is not None else default_models_dir()
        self._models: Dict[str, ModelSpec] = {}
        if load_files:
            self._load_all()
        for m in models or []:
            self.register(m)

    def _load_all(self) -> None:
        if not self.models_dir.exists():
            log.warning("models dir not found: %s", self.models_dir)
            return

        for p in sorted(self.models_dir.glob("*.json")):
            try:
                data = json.loads(p.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ModelSpecError(f"{p.name}: invalid JSON: {e}") from e
            self.register(ModelSpec.from_dict(data))

        log.debug("loaded %s models from %s", len(self._models), self.models_dir)

    def register(self, model: ModelSpec) -> None:
        if not model.type:
            raise ModelSpecError("Model specification has no type")
        self._models[normalize_type_name(model.type)] = model

    def get(self, name: Optional[str]) -> Optional[ModelSpec]:
        if not name:
            return None
        return self._models.get(normalize_type_name(name))

    def model_for(self, name: Optional[str]) -> ModelSpec:
        """Registered model, or an empty unspecified one."""
        found = self.get(name)
        if found is not None:
            return found
        return ModelSpec.unspecified(normalize_type_name(name))

    def list_names(self) -> List[str]:
        return sorted(self._models.keys())

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        return len(self._models)
