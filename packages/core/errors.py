"""
Error taxonomy for request handling.

  - ConfigParseError: profile file unreadable or malformed. Fatal to a single
    load call; skipped during a directory scan.
  - NoModelError: no model could be selected for a request.
  - InferenceError: the engine failed to build or produce a sample.
  - TemplateMissing: no usable template for a key. Always recovered locally;
    `invalid` separates a broken template from an absent one.
  - RequestValidationError: a request body field has the wrong shape.
"""

from __future__ import annotations


class PromptgateError(RuntimeError):
    pass


class ConfigParseError(PromptgateError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot load config file {path}: {reason}")
        self.path = path
        self.reason = reason


class NoModelError(PromptgateError):
    pass


class InferenceError(PromptgateError):
    pass


class TemplateMissing(PromptgateError):
    def __init__(self, message: str, *, invalid: bool = False) -> None:
        super().__init__(message)
        # True when a template exists but cannot be parsed or rendered.
        self.invalid = invalid


class RequestValidationError(PromptgateError, ValueError):
    pass
