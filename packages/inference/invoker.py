"""
Sequential sample generation.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from packages.core.errors import InferenceError
from packages.models.interfaces import Predictor


def sample_count(n: int) -> int:
    return n if n > 0 else 1


def generate(
    predict: Predictor,
    n: int,
    on_sample: Optional[Callable[[int, str], None]] = None,
) -> List[str]:
    """
    Call `predict` sample_count(n) times, in order. The first failure aborts
    the remaining calls and nothing produced so far is returned.
    """
    out: List[str] = []
    for i in range(sample_count(n)):
        try:
            sample = predict()
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(f"sample {i} failed: {e.__class__.__name__}: {e}") from e
        if on_sample is not None:
            on_sample(i, sample)
        out.append(sample)
    return out
