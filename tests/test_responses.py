"""
Tests for response envelopes and chat prompt flattening.
"""

from __future__ import annotations

from packages.api import build_choices, build_error, build_model_list, build_prompt, build_response
from packages.core.types import Message


def test_build_prompt_maps_roles():
    msgs = [Message("system", "be nice"), Message("user", "hi"), Message("assistant", "hello")]
    out = build_prompt(msgs, {"user": "HUMAN:", "assistant": "BOT:"})
    assert out == "system be nice\nHUMAN: hi\nBOT: hello"


def test_completion_choices():
    choices = build_choices(["a", "b"], chat=False)
    assert choices == [
        {"index": 0, "text": "a", "finish_reason": "stop"},
        {"index": 1, "text": "b", "finish_reason": "stop"},
    ]


def test_chat_choices():
    choices = build_choices(["a"], chat=True)
    assert choices == [{"index": 0, "message": {"role": "assistant", "content": "a"}, "finish_reason": "stop"}]


def test_response_echoes_caller_model():
    r = build_response("gpt-3.5-turbo", [], chat=True)
    assert r["model"] == "gpt-3.5-turbo"
    assert r["object"] == "chat.completion"
    assert r["id"].startswith("chatcmpl-")
    assert isinstance(r["created"], int)

    r = build_response("", [], chat=False)
    assert r["model"] == ""
    assert r["object"] == "text_completion"


def test_model_list_union_dedup():
    out = build_model_list(["a.bin", "b.bin"], ["b.bin", "gpt-4"])
    assert out["object"] == "list"
    assert [m["id"] for m in out["data"]] == ["a.bin", "b.bin", "gpt-4"]
    assert all(m["object"] == "model" for m in out["data"])


def test_error_envelope():
    assert build_error("nope", "invalid_request_error") == {"error": {"message": "nope", "type": "invalid_request_error"}}
