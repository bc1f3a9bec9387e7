"""Data models for generation profiles (<model>.yaml and friends)."""


from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping

from packages.core.types import Message


@dataclass
class TemplateConfig:
    completion: str = ""
    chat: str = ""


@dataclass
class Profile:
    """
    A named generation-parameter bundle.

    Also used as the per-request resolved configuration. `prompt` and
    `messages` seed a request that sends none; a YAML `stop` value is
    folded into `stopwords` at parse time.
    """
    name: str = ""
    model: str = ""
    backend: str = ""  # engine kind; "" means the router default

    prompt: str = ""
    messages: List[Message] = field(default_factory=list)

    temperature: float = 0.0
    top_p: float = 0.0
    top_k: int = 0
    max_tokens: int = 0
    repeat_penalty: float = 0.0
    seed: int = 0
    batch: int = 0
    n_keep: int = 0
    ignore_eos: bool = False
    echo: bool = False
    f16: bool = False

    threads: int = 0
    context_size: int = 0
    debug: bool = False

    stopwords: List[str] = field(default_factory=list)
    cutstrings: List[str] = field(default_factory=list)
    trimspace: List[str] = field(default_factory=list)
    roles: Dict[str, str] = field(default_factory=dict)
    template: TemplateConfig = field(default_factory=TemplateConfig)

    def copy(self) -> "Profile":
        return copy.deepcopy(self)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Profile":
        """
        Build from one YAML mapping. Unknown keys are ignored; YAML `null`
        counts as absent. Raises ValueError on a value of the wrong shape.
        """
        if not isinstance(raw, Mapping):
            raise ValueError(f"profile must be a mapping, got {type(raw).__name__}")

        kw: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in raw or raw[f.name] is None:
                continue
            v = raw[f.name]
            if f.name in {"stopwords", "cutstrings", "trimspace"}:
                kw[f.name] = _str_list(f.name, v)
            elif f.name == "roles":
                if not isinstance(v, Mapping):
                    raise ValueError("roles must be a mapping")
                kw[f.name] = {_norm_scalar(k): _norm_scalar(r) for k, r in v.items()}
            elif f.name == "template":
                if not isinstance(v, Mapping):
                    raise ValueError("template must be a mapping")
                kw[f.name] = TemplateConfig(
                    completion=_norm_scalar(v.get("completion") or ""),
                    chat=_norm_scalar(v.get("chat") or ""),
                )
            elif f.name == "messages":
                if not isinstance(v, list):
                    raise ValueError("messages must be a list")
                kw[f.name] = [Message.from_dict(m) for m in v]
            else:
                kw[f.name] = _scalar(f.name, f.type, v)

        stop = raw.get("stop")
        if stop is not None:
            kw["stopwords"] = kw.get("stopwords", []) + [s for s in _str_list("stop", stop) if s]
        return cls(**kw)


def default_profile(model: str) -> Profile:
    """Starting point for a model with no stored profile."""
    return Profile(
        model=model,
        top_p=0.7,
        top_k=80,
        max_tokens=512,
        temperature=0.9,
    )


def _norm_scalar(v: Any) -> str:
    """
    YAML parses the literal `null` into Python None and bare words like
    `yes` or `1` into bools/ints. Names and labels are always strings.
    """
    if v is None:
        return ""
    return str(v)


def _str_list(name: str, v: Any) -> List[str]:
    if isinstance(v, str):
        return [v]
    if not isinstance(v, list):
        raise ValueError(f"{name} must be a list of strings")
    return [_norm_scalar(x) for x in v]


def _scalar(name: str, type_name: str, v: Any) -> Any:
    # Annotations are strings under `from __future__ import annotations`.
    if type_name == "str":
        return _norm_scalar(v)
    if type_name == "bool":
        if not isinstance(v, bool):
            raise ValueError(f"{name} must be a boolean")
        return v
    if type_name == "int":
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"{name} must be an integer")
        return v
    if type_name == "float":
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"{name} must be a number")
        return float(v)
    raise ValueError(f"unsupported field type for {name}: {type_name}")
