"""
Secret redaction for anything written to the audit log.
"""

from __future__ import annotations

import re
from typing import Any, Dict

REDACT_PATTERNS = [
    re.compile(r"(?i)(api[_-]?key\s*[:=]\s*)(['\"][^'\"]+['\"])"),
    re.compile(r"(?i)(authorization\s*[:=]\s*)(['\"][^'\"]+['\"])"),
    re.compile(r"(?i)bearer\s+[A-Za-z0-9._~+/=\-]{8,}"),
    re.compile(r"(?i)sk-[A-Za-z0-9]{20,}"),
]

def redact_text(s: str) -> str:
    out = s
    for pat in REDACT_PATTERNS:
        out = pat.sub("[REDACTED]", out)
    return out


def redact_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Conservative redaction:
      - If a value is a string, run redact_text()
      - If dict/list, recurse
      - Else keep as-is
    """
    def walk(v: Any) -> Any:
        if isinstance(v, str):
            return redact_text(v)
        if isinstance(v, dict):
            return {k: walk(v[k]) for k in v}
        if isinstance(v, (list, tuple)):
            return [walk(x) for x in v]
        return v

    return walk(payload)  # type: ignore[return-value]
