"""
Profiles, the profile store, server settings and per-request resolution.
"""

from .profiles import Profile, TemplateConfig, default_profile
from .resolver import ConfigResolver, Resolution, apply_overrides, apply_server_settings
from .settings import ServerSettings, env_flag
from .store import DirectoryLoad, ProfileStore

__all__ = [
    "ConfigResolver",
    "DirectoryLoad",
    "Profile",
    "ProfileStore",
    "Resolution",
    "ServerSettings",
    "TemplateConfig",
    "apply_overrides",
    "apply_server_settings",
    "default_profile",
    "env_flag",
]
