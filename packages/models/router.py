"""Engine Router
Routes a resolved configuration to the inference engine for its backend kind.
"""


from __future__ import annotations

from typing import Dict, List, Optional

from packages.config.profiles import Profile
from packages.core.errors import InferenceError
from packages.models.interfaces import InferenceEngine, Predictor


class EngineRouter:
    def __init__(self, default_kind: str = "null") -> None:
        self.default_kind = default_kind
        self._engines: Dict[str, InferenceEngine] = {}

    def register(self, kind: str, engine: InferenceEngine) -> None:
        if kind in self._engines:
            raise ValueError(f"engine already registered: {kind}")
        self._engines[kind] = engine

    def kinds(self) -> List[str]:
        return sorted(self._engines)

    def get_engine(self, kind: Optional[str] = None) -> InferenceEngine:
        """
        Resolve a backend kind (e.g. 'null') into an engine. Empty means the
        router default.
        """
        kind = kind or self.default_kind
        engine = self._engines.get(kind)
        if engine is None:
            raise InferenceError(f"engine kind not registered: {kind}")
        return engine

    def create_inference(self, text: str, config: Profile) -> Predictor:
        engine = self.get_engine(config.backend)
        try:
            return engine.create_inference(text, config)
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(f"cannot create inference for {config.model}: {e.__class__.__name__}: {e}") from e
