"""Profile Store
In-memory name -> Profile mapping, filled from YAML files.
"""


from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml  # requires pyyaml

from packages.config.profiles import Profile
from packages.core.errors import ConfigParseError

# Directory scans only consider files whose name contains this marker.
PROFILE_FILE_MARKER = ".yaml"


@dataclass(frozen=True)
class DirectoryLoad:
    loaded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def _read_yaml(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(str(path), f"cannot read file: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(str(path), f"not valid utf-8: {e}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(str(path), f"malformed yaml: {e}") from e


def _parse_profile(path: Path, raw: Any) -> Profile:
    try:
        return Profile.from_dict(raw)
    except ValueError as e:
        raise ConfigParseError(str(path), str(e)) from e


def _profile_entries(path: Path, data: Any) -> List[Any]:
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("configs"), list):
        return data["configs"]
    raise ConfigParseError(str(path), "expected a list of profiles")


class ProfileStore:
    """
    Shared across all requests for the process lifetime.
    Lookups hand out copies; loads replace whole entries, never merge fields.
    Profiles without a name are dropped silently.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._profiles: Dict[str, Profile] = {}

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._profiles

    def __len__(self) -> int:
        with self._lock:
            return len(self._profiles)

    def get(self, name: str) -> Optional[Profile]:
        with self._lock:
            p = self._profiles.get(name)
            return p.copy() if p is not None else None

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._profiles)

    def put(self, profile: Profile) -> bool:
        if not profile.name:
            return False
        with self._lock:
            self._profiles[profile.name] = profile.copy()
        return True

    def load_one(self, path: Path) -> Optional[str]:
        """
        Load a single-profile file. Returns the stored name, or None when the
        file carries no name.
        """
        profile = _parse_profile(path, _read_yaml(path))
        return profile.name if self.put(profile) else None

    def load_multi(self, path: Path) -> List[str]:
        """
        Load a file holding an ordered list of profiles, either a top-level
        sequence or a mapping with a `configs` sequence. Later entries with
        the same name win.
        """
        return self._put_all(path, _profile_entries(path, _read_yaml(path)))

    def _put_all(self, path: Path, entries: List[Any]) -> List[str]:
        # Parse everything before inserting so a bad entry leaves the store untouched.
        profiles = [_parse_profile(path, raw) for raw in entries]
        names: List[str] = []
        with self._lock:
            for p in profiles:
                if self.put(p):
                    names.append(p.name)
        return names

    def load(self, path: Path) -> List[str]:
        """Load a file of either shape: a list of profiles or a single one."""
        data = _read_yaml(path)
        if isinstance(data, dict) and "configs" not in data:
            profile = _parse_profile(path, data)
            return [profile.name] if self.put(profile) else []
        return self._put_all(path, _profile_entries(path, data))

    def load_directory(self, path: Path) -> DirectoryLoad:
        """
        Load every profile file in a directory. A file that fails to parse is
        skipped; only a failure to list the directory is raised.
        """
        try:
            entries = sorted(path.iterdir(), key=lambda x: x.name)
        except OSError as e:
            raise ConfigParseError(str(path), f"cannot list directory: {e}") from e

        loaded: List[str] = []
        skipped: List[str] = []
        for child in entries:
            if PROFILE_FILE_MARKER not in child.name or not child.is_file():
                continue
            try:
                name = self.load_one(child)
            except ConfigParseError:
                skipped.append(child.name)
                continue
            if name:
                loaded.append(name)
        return DirectoryLoad(loaded=loaded, skipped=skipped)
