"""
Filesystem-backed model lister and template expander.

Model files, their `<model>.yaml` companion profiles and `<key>.tmpl`
prompt templates all live side by side in one models directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound

from packages.core.errors import TemplateMissing

TEMPLATE_SUFFIX = ".tmpl"
NON_MODEL_SUFFIXES = {".yaml", ".yml", TEMPLATE_SUFFIX, ".keep"}


def _resolve_under(root: Path, rel: str) -> Path:
    p = (root / rel).resolve()
    r = root.resolve()
    if r not in p.parents and p != r:
        raise ValueError("path escapes models path")
    return p


class ModelLoader:
    def __init__(self, models_path: Path) -> None:
        self.models_path = models_path
        self._env = Environment(
            loader=FileSystemLoader(str(models_path)),
            keep_trailing_newline=True,
            autoescape=False,
        )

    def list_models(self) -> List[str]:
        if not self.models_path.is_dir():
            return []
        out = []
        for child in sorted(self.models_path.iterdir(), key=lambda x: x.name):
            if child.name.startswith(".") or not child.is_file():
                continue
            if child.suffix.lower() in NON_MODEL_SUFFIXES:
                continue
            out.append(child.name)
        return out

    def exists_in_path(self, name: str) -> bool:
        if not name:
            return False
        try:
            return _resolve_under(self.models_path, name).is_file()
        except ValueError:
            return False

    def template_prefix(self, key: str, data: Mapping[str, Any]) -> str:
        """
        Render <models_path>/<key>.tmpl with `data` (e.g. {{ Input }}).
        Raises TemplateMissing when the template is absent or unusable.
        """
        if not key:
            raise TemplateMissing("empty template key")
        try:
            tmpl = self._env.get_template(key + TEMPLATE_SUFFIX)
        except TemplateNotFound as e:
            raise TemplateMissing(f"no template for {key}") from e
        except TemplateError as e:
            raise TemplateMissing(f"template for {key} is invalid: {e}", invalid=True) from e
        try:
            return tmpl.render(**data)
        except TemplateError as e:
            raise TemplateMissing(f"template for {key} failed to render: {e}", invalid=True) from e
