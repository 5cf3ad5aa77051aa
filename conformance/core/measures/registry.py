from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from conformance.core.errors import ProfileDefinitionError

from .builtins import builtin_profiles
from .models import Profile

log = logging.getLogger("conformance.profiles")


def default_profiles_dir() -> Optional[Path]:
    env = (os.getenv("CONFORMANCE_PROFILES_DIR") or "").strip()
    return Path(env) if env else None


class ProfileRegistry:
    """Loads scoring profiles.

    Resolution order:
      1) Built-in profiles (always present)
      2) Optional *.json / *.yaml files from profiles_dir (CONFORMANCE_PROFILES_DIR)

    A file with the identifier of an earlier profile replaces it.
    """

    def __init__(self, profiles_dir: Optional[Path | str] = None):
        self.profiles_dir = Path(profiles_dir) if profiles_dir is not None else default_profiles_dir()
        self._profiles: Dict[str, Profile] = {}
        self._load_all()

    def _load_all(self) -> None:
        self._profiles = {p.identifier: p for p in builtin_profiles()}

        if self.profiles_dir is None or not self.profiles_dir.exists():
            return

        files = sorted(
            p for p in self.profiles_dir.iterdir()
            if p.suffix.lower() in (".json", ".yaml", ".yml")
        )
        for p in files:
            try:
                text = p.read_text(encoding="utf-8")
                data = json.loads(text) if p.suffix.lower() == ".json" else yaml.safe_load(text)
                profile = Profile.from_dict(data)
            except (OSError, ValueError, yaml.YAMLError, ProfileDefinitionError) as e:
                # Optional files; built-ins stay available.
                log.warning("skipping profile file %s: %s", p.name, e)
                continue
            self._profiles[profile.identifier] = profile

    def list_identifiers(self) -> List[str]:
        return sorted(self._profiles.keys())

    def list_profiles(self) -> List[Profile]:
        return [self._profiles[k] for k in self.list_identifiers()]

    def get(self, identifier: str) -> Optional[Profile]:
        return self._profiles.get(identifier)

    def register(self, profile: Profile) -> None:
        self._profiles[profile.identifier] = profile


@lru_cache(maxsize=1)
def default_profile_registry() -> ProfileRegistry:
    """Process-wide registry; profile files are read once."""
    return ProfileRegistry()
