"""
Template selection and prompt expansion.
"""

from __future__ import annotations

from typing import Optional, Tuple

from packages.config.profiles import Profile
from packages.core.errors import TemplateMissing
from packages.models.interfaces import TemplateExpander


def template_key(config: Profile, chat: bool) -> str:
    if chat and config.template.chat:
        return config.template.chat
    if not chat and config.template.completion:
        return config.template.completion
    return config.model


def apply_template(
    expander: TemplateExpander, config: Profile, text: str, chat: bool
) -> Tuple[str, bool, Optional[str]]:
    """
    Returns (text, applied, rejected). A missing template is not an error:
    the input goes through untemplated. `rejected` carries the reason when a
    template exists but could not be used, and is None otherwise.
    """
    try:
        return expander.template_prefix(template_key(config, chat), {"Input": text}), True, None
    except TemplateMissing as e:
        return text, False, str(e) if e.invalid else None
