"""
Collaborator contracts consumed by the request pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Protocol

if TYPE_CHECKING:
    from packages.config.profiles import Profile

# Zero-argument callable producing one completion sample per call.
Predictor = Callable[[], str]


class ModelLister(Protocol):
    models_path: Path

    def list_models(self) -> List[str]: ...

    def exists_in_path(self, name: str) -> bool: ...


class TemplateExpander(Protocol):
    def template_prefix(self, key: str, data: Mapping[str, Any]) -> str:
        """Raises TemplateMissing when no template exists for `key`."""
        ...


class InferenceEngine(Protocol):
    def create_inference(self, text: str, config: Profile) -> Predictor: ...
