"""
Templating, sample generation and post-processing.
"""

from .invoker import generate, sample_count
from .postprocess import PatternCache, postprocess, trim_prefixes
from .templates import apply_template, template_key

__all__ = [
    "PatternCache",
    "apply_template",
    "generate",
    "postprocess",
    "sample_count",
    "template_key",
    "trim_prefixes",
]
