"""
OpenAI-compatible response shapes.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Mapping

from packages.core.types import Message, ModelEntry

FINISH_REASON = "stop"


def build_prompt(messages: Iterable[Message], roles: Mapping[str, str]) -> str:
    """Flatten chat messages to '<label> <content>' lines, label from the role map."""
    lines = []
    for m in messages:
        label = roles.get(m.role) or m.role
        lines.append(f"{label} {m.content}")
    return "\n".join(lines)


def build_choices(samples: List[str], chat: bool) -> List[Dict[str, Any]]:
    choices: List[Dict[str, Any]] = []
    for i, s in enumerate(samples):
        if chat:
            choices.append({"index": i, "message": {"role": "assistant", "content": s}, "finish_reason": FINISH_REASON})
        else:
            choices.append({"index": i, "text": s, "finish_reason": FINISH_REASON})
    return choices


def build_response(model: str, choices: List[Dict[str, Any]], chat: bool) -> Dict[str, Any]:
    """
    `model` must be what the caller sent, not the resolved model, for
    OpenAI client compatibility.
    """
    prefix, obj = ("chatcmpl", "chat.completion") if chat else ("cmpl", "text_completion")
    return {
        "id": f"{prefix}-{uuid.uuid4().hex}",
        "object": obj,
        "created": int(time.time()),
        "model": model,
        "choices": choices,
    }


def build_model_list(discovered: Iterable[str], profile_names: Iterable[str]) -> Dict[str, Any]:
    """Model files first, then stored profiles not already listed."""
    seen = set()
    data: List[Dict[str, Any]] = []
    for name in list(discovered) + list(profile_names):
        if name in seen:
            continue
        seen.add(name)
        data.append(asdict(ModelEntry(id=name)))
    return {"object": "list", "data": data}


def build_error(message: str, type: str, code: Any = None) -> Dict[str, Any]:
    err: Dict[str, Any] = {"message": message, "type": type}
    if code is not None:
        err["code"] = code
    return {"error": err}
