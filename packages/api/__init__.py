"""
Response envelopes for the completion, chat and model-listing endpoints.
"""

from .responses import build_choices, build_error, build_model_list, build_prompt, build_response

__all__ = ["build_choices", "build_error", "build_model_list", "build_prompt", "build_response"]
