"""Deterministic engine used for tests and dry runs."""


from __future__ import annotations

from typing import List, Optional

from packages.config.profiles import Profile
from packages.models.interfaces import Predictor


class NullEngine:
    """
    Deterministic stand-in for a real text-generation engine.

    With `replies`, successive predictions cycle through them. Without, each
    prediction is the last `max_tokens` whitespace-separated words of the
    input. Shared across requests, so it holds nothing per call.
    """

    def __init__(self, replies: Optional[List[str]] = None) -> None:
        self._replies = tuple(replies or [])

    def create_inference(self, text: str, config: Profile) -> Predictor:
        state = {"i": 0}

        def predict() -> str:
            i = state["i"]
            state["i"] = i + 1
            if self._replies:
                return self._replies[i % len(self._replies)]
            words = text.split()
            if config.max_tokens > 0:
                words = words[-config.max_tokens:]
            return " ".join(words)

        return predict
