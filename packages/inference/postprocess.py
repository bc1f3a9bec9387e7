"""
Post-processing of generated samples: echo, cut-string removal, prefix trim.
"""

from __future__ import annotations

import re
import threading
from typing import Dict, List

from packages.config.profiles import Profile


class PatternCache:
    """
    Process-wide cut-string -> compiled pattern map. One compiled pattern per
    string for the cache lifetime. Compiled patterns are immutable and are
    used outside the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._patterns: Dict[str, "re.Pattern[str]"] = {}

    def compile(self, pattern: str) -> "re.Pattern[str]":
        with self._lock:
            reg = self._patterns.get(pattern)
            if reg is None:
                reg = re.compile(pattern)
                self._patterns[pattern] = reg
            return reg

    def __len__(self) -> int:
        with self._lock:
            return len(self._patterns)


def trim_prefixes(text: str, prefixes: List[str]) -> str:
    for prefix in prefixes:
        if prefix and text.startswith(prefix):
            text = text[len(prefix):]
        text = text.strip()
    return text


def postprocess(sample: str, config: Profile, prompt: str, cache: PatternCache) -> str:
    """
    Order matters: echoed prompt text goes through the same cleanup as the
    generated text.
    """
    text = prompt + sample if config.echo else sample

    for c in config.cutstrings:
        text = cache.compile(c).sub("", text)

    return trim_prefixes(text, config.trimspace)
