"""
Server-wide settings. Read from the environment, then overridden by CLI flags.

Environment:
  - MODELS_PATH: directory holding model files, templates and profiles
  - CONFIG_FILE: optional multi-profile YAML file loaded at startup
  - THREADS / CONTEXT_SIZE: forced onto every request when non-zero
  - F16: force half precision on every request
  - DEBUG: include prompt and sample text in the audit log
  - ADDRESS: host:port to bind, localhost-only by default
  - RUNTIME_DIR: where logs/audit.jsonl is written
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_ADDRESS = "127.0.0.1:8080"


def env_flag(name: str, default: str = "false") -> bool:
    v = os.environ.get(name, default).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int = 0) -> int:
    v = os.environ.get(name, "").strip()
    if not v:
        return default
    try:
        return int(v)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {v!r}") from e


@dataclass(frozen=True)
class ServerSettings:
    models_path: Path = Path("models")
    config_file: Optional[Path] = None
    threads: int = 0
    context_size: int = 0
    f16: bool = False
    debug: bool = False
    address: str = DEFAULT_ADDRESS
    runtime_dir: Path = Path("runtime")

    @classmethod
    def from_env(cls) -> "ServerSettings":
        config_file = os.environ.get("CONFIG_FILE", "").strip()
        return cls(
            models_path=Path(os.environ.get("MODELS_PATH", "models")),
            config_file=Path(config_file) if config_file else None,
            threads=env_int("THREADS"),
            context_size=env_int("CONTEXT_SIZE"),
            f16=env_flag("F16"),
            debug=env_flag("DEBUG"),
            address=os.environ.get("ADDRESS", DEFAULT_ADDRESS).strip() or DEFAULT_ADDRESS,
            runtime_dir=Path(os.environ.get("RUNTIME_DIR", "runtime")),
        )

    def host_port(self) -> Tuple[str, int]:
        host, sep, port = self.address.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError(f"address must be host:port, got {self.address!r}")
        return host or "127.0.0.1", int(port)
