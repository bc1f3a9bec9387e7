"""
Tests for audit log hash chaining, redaction and concurrent appends.
"""

import threading
from pathlib import Path

from packages.core.audit import AuditWriter, read_request_events, redact_text, verify_audit_log


def test_audit_appends_and_verifies(tmp_path: Path):
    log = tmp_path / "runtime" / "logs" / "audit.jsonl"
    w = AuditWriter(log)
    w.append("r1", "RequestReceived", {"x": "y"})
    w.append("r1", "RequestCompleted", {"ok": True})
    ok, err = verify_audit_log(log)
    assert ok is True
    assert err is None


def test_audit_tamper_detected(tmp_path: Path):
    log = tmp_path / "runtime" / "logs" / "audit.jsonl"
    w = AuditWriter(log)
    w.append("r1", "RequestReceived", {"x": "y"})
    w.append("r1", "RequestCompleted", {"ok": True})

    # Tamper with first line
    lines = log.read_text(encoding="utf-8").splitlines()
    lines[0] = lines[0].replace('"y"', '"z"')
    log.write_text("\n".join(lines) + "\n", encoding="utf-8")

    ok, err = verify_audit_log(log)
    assert ok is False
    assert err is not None


def test_chain_resumes_after_reopen(tmp_path: Path):
    log = tmp_path / "audit.jsonl"
    AuditWriter(log).append("r1", "RequestReceived", {})
    AuditWriter(log).append("r2", "RequestReceived", {})
    ok, err = verify_audit_log(log)
    assert ok is True, err


def test_concurrent_appends_keep_chain_valid(tmp_path: Path):
    log = tmp_path / "audit.jsonl"
    w = AuditWriter(log)

    def worker(rid: str):
        for i in range(20):
            w.append(rid, "SampleGenerated", {"index": i})

    threads = [threading.Thread(target=worker, args=(f"r{n}",)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ok, err = verify_audit_log(log)
    assert ok is True, err
    assert [e["payload"]["index"] for e in read_request_events(log, "r3")] == list(range(20))


def test_secrets_are_redacted(tmp_path: Path):
    assert "sk-" not in redact_text("key sk-abcdefghijklmnopqrstuvwx")
    assert redact_text("Bearer abcdefgh12345") == "[REDACTED]"

    log = tmp_path / "audit.jsonl"
    AuditWriter(log).append("r1", "RequestReceived", {"note": ["api_key='abc123'"]})
    assert "abc123" not in log.read_text(encoding="utf-8")
