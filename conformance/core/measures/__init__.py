from .models import Exclusion, ExclusionMode, Measure, Profile, ProfileScore
from .processor import ExclusionMatcher
from .builtins import accessibility_profile, builtin_profiles, common_profile
from .registry import ProfileRegistry, default_profile_registry

__all__ = [
    "Exclusion",
    "ExclusionMode",
    "Measure",
    "Profile",
    "ProfileScore",
    "ExclusionMatcher",
    "accessibility_profile",
    "builtin_profiles",
    "common_profile",
    "ProfileRegistry",
    "default_profile_registry",
]
