"""
Hash-chained request audit log.
"""

from .writer import AuditWriter, read_request_events, verify_audit_log
from .redact import redact_text

__all__ = ['AuditWriter', 'read_request_events', 'verify_audit_log', 'redact_text']
