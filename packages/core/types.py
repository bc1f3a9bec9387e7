"""
Data types used throughout the system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional

from packages.core.errors import RequestValidationError

RequestId = str

@dataclass(frozen=True)
class Message:
    role: str
    content: str

    @classmethod
    def from_dict(cls, raw: Any) -> "Message":
        if not isinstance(raw, Mapping):
            raise RequestValidationError(f"message must be an object, got {type(raw).__name__}")
        role = raw.get("role") or ""
        content = raw.get("content") or ""
        if not isinstance(role, str) or not isinstance(content, str):
            raise RequestValidationError("message role and content must be strings")
        return cls(role=role, content=content)


# Request body fields grouped by JSON type.
_INT_FIELDS = ("top_k", "max_tokens", "n", "batch", "n_keep", "seed")
_FLOAT_FIELDS = ("top_p", "temperature", "repeat_penalty")
_BOOL_FIELDS = ("echo", "f16", "ignore_eos")
_STR_FIELDS = ("model", "prompt")


@dataclass(frozen=True)
class CompletionRequest:
    """
    Per-call overrides. A zero/empty field means "do not override".
    `stop` is normalized to a list; the wire format accepts a string or a list.
    """
    model: str = ""
    prompt: str = ""
    stop: List[str] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)
    echo: bool = False
    n: int = 0

    top_p: float = 0.0
    top_k: int = 0
    temperature: float = 0.0
    max_tokens: int = 0

    batch: int = 0
    f16: bool = False
    ignore_eos: bool = False
    repeat_penalty: float = 0.0
    n_keep: int = 0
    seed: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompletionRequest":
        """
        Build from a decoded JSON body. Unknown keys are ignored, null values
        count as absent. Raises RequestValidationError on a field of the wrong type.
        """
        if not isinstance(data, Mapping):
            raise RequestValidationError("request body must be a JSON object")

        kw: Dict[str, Any] = {}
        for name in _STR_FIELDS:
            v = data.get(name)
            if v is None:
                continue
            if not isinstance(v, str):
                raise RequestValidationError(f"{name} must be a string")
            kw[name] = v
        for name in _INT_FIELDS:
            v = data.get(name)
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, int):
                raise RequestValidationError(f"{name} must be an integer")
            kw[name] = v
        for name in _FLOAT_FIELDS:
            v = data.get(name)
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise RequestValidationError(f"{name} must be a number")
            kw[name] = float(v)
        for name in _BOOL_FIELDS:
            v = data.get(name)
            if v is None:
                continue
            if not isinstance(v, bool):
                raise RequestValidationError(f"{name} must be a boolean")
            kw[name] = v

        stop = data.get("stop")
        if isinstance(stop, str):
            kw["stop"] = [stop] if stop else []
        elif isinstance(stop, list) and all(isinstance(s, str) for s in stop):
            kw["stop"] = [s for s in stop if s]
        elif stop is not None:
            raise RequestValidationError("stop must be a string or a list of strings")

        messages = data.get("messages")
        if messages is not None:
            if not isinstance(messages, list):
                raise RequestValidationError("messages must be a list")
            kw["messages"] = [Message.from_dict(m) for m in messages]

        return cls(**kw)


@dataclass(frozen=True)
class ModelEntry:
    id: str
    object: str = "model"


AuditEventType = Literal[
    "ProfilesLoaded",
    "RequestReceived",
    "ModelSelected",
    "CompanionConfigLoaded",
    "ConfigResolved",
    "TemplateApplied",
    "SampleGenerated",
    "RequestCompleted",
    "RequestFailed",
]

@dataclass(frozen=True)
class AuditEvent:
    request_id: RequestId
    type: AuditEventType
    ts_utc: str  # ISO8601
    payload: Dict[str, Any]
    prev_hash: Optional[str] = None
    hash: Optional[str] = None

@dataclass(frozen=True)
class RequestResult:
    request_id: RequestId
    ok: bool
    response: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[str] = None  # see ERROR_KINDS in apps.server.orchestrator
