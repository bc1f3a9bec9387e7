"""Config Resolver
Computes the effective configuration for one request by layering default
values, stored profile values, request overrides and server-wide flags.
"""


from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from packages.config.profiles import Profile, default_profile
from packages.config.settings import ServerSettings
from packages.config.store import ProfileStore
from packages.core.errors import NoModelError
from packages.core.types import CompletionRequest
from packages.models.interfaces import ModelLister


@dataclass(frozen=True)
class Resolution:
    model: str
    config: Profile
    companion_loaded: List[str]


def apply_overrides(config: Profile, request: CompletionRequest) -> Profile:
    """
    Non-zero wins: a zero/empty request field leaves the profile value alone.
    Stop values are appended to the stopwords, never replace them.
    """
    if request.echo:
        config.echo = True
    if request.top_k != 0:
        config.top_k = request.top_k
    if request.top_p != 0:
        config.top_p = request.top_p
    if request.temperature != 0:
        config.temperature = request.temperature
    if request.max_tokens != 0:
        config.max_tokens = request.max_tokens
    for s in request.stop:
        if s:
            config.stopwords.append(s)
    if request.repeat_penalty != 0:
        config.repeat_penalty = request.repeat_penalty
    if request.n_keep != 0:
        config.n_keep = request.n_keep
    if request.batch != 0:
        config.batch = request.batch
    if request.f16:
        config.f16 = True
    if request.ignore_eos:
        config.ignore_eos = True
    if request.seed != 0:
        config.seed = request.seed
    return config


def apply_server_settings(config: Profile, settings: ServerSettings) -> Profile:
    if settings.threads != 0:
        config.threads = settings.threads
    if settings.context_size != 0:
        config.context_size = settings.context_size
    # Only ever turns half precision on.
    if settings.f16:
        config.f16 = True
    return config


def _companion_path(models_path: Path, model: str) -> Optional[Path]:
    p = (models_path / f"{model}.yaml").resolve()
    root = models_path.resolve()
    if root not in p.parents:
        return None
    return p


class ConfigResolver:
    def __init__(self, *, store: ProfileStore, lister: ModelLister, settings: ServerSettings) -> None:
        self._store = store
        self._lister = lister
        self._settings = settings

    def select_model(self, requested: str, bearer: str = "") -> str:
        """
        Precedence: a bearer naming an existing model file, then the model
        named in the request, then the first listed model.
        """
        if bearer and self._lister.exists_in_path(bearer):
            return bearer
        if requested:
            return requested
        try:
            models = self._lister.list_models()
        except OSError as e:
            raise NoModelError(f"no model specified and model listing failed: {e}") from e
        if not models:
            raise NoModelError("no model specified and no models available")
        return models[0]

    def load_companion(self, model: str) -> List[str]:
        """
        Load <models_path>/<model>.yaml into the store if it exists, replacing
        entries of the same name. Raises ConfigParseError if it is malformed.
        """
        p = _companion_path(self._lister.models_path, model)
        if p is None or not p.is_file():
            return []
        return self._store.load(p)

    def resolve(self, request: CompletionRequest, bearer: str = "") -> Resolution:
        model = self.select_model(request.model, bearer)
        companion = self.load_companion(model)

        config = self._store.get(model)
        if config is None:
            config = default_profile(model)

        apply_overrides(config, request)
        apply_server_settings(config, self._settings)
        return Resolution(model=model, config=config, companion_loaded=companion)
