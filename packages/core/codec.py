"""
Canonical JSON encoding and hashing for audit events and config snapshots.
"""

from __future__ import annotations

import json
import hashlib
from dataclasses import asdict, is_dataclass
from pathlib import PurePath
from typing import Any

def canonicalize(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return canonicalize(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): canonicalize(obj[k]) for k in sorted(obj.keys(), key=str)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, PurePath):
        return obj.as_posix()
    return obj

def canonical_json_bytes(obj: Any) -> bytes:
    canon = canonicalize(obj)
    s = json.dumps(canon, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")

def stable_sha256(obj: Any) -> str:
    return hashlib.sha256(canonical_json_bytes(obj)).hexdigest()
