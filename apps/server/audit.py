"""
Audit helpers for server app. No side effects on import.
"""

from __future__ import annotations

from packages.config.settings import ServerSettings
from packages.core.audit import AuditWriter

AUDIT_LOG_RELPATH = "logs/audit.jsonl"


def get_audit_writer(settings: ServerSettings) -> AuditWriter:
    return AuditWriter(settings.runtime_dir / AUDIT_LOG_RELPATH)
