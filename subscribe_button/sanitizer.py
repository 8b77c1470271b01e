"""Whitelisting and normalisation of caller supplied button options."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from .models import RenderOptions
from .registry import DEFAULT_REGISTRY, WhitelistRegistry

logger = logging.getLogger(__name__)

_DEFAULTS = RenderOptions()
HIDE_VALUES = (1, "1", True, "true", "on")


def sanitize(
    options: RenderOptions, registry: WhitelistRegistry = DEFAULT_REGISTRY
) -> RenderOptions:
    """Replace size, style and format values unknown to the registry with defaults."""
    allowed = {
        "size": registry.sizes,
        "style": registry.styles,
        "format": registry.formats,
    }
    replacements = {}
    for name, legal in allowed.items():
        value = getattr(options, name)
        if not isinstance(value, str) or value not in legal:
            fallback = getattr(_DEFAULTS, name)
            logger.debug("Invalid %s %r; falling back to %r", name, value, fallback)
            replacements[name] = fallback

    if not replacements:
        return options
    return dataclasses.replace(options, **replacements)


def language(value: str) -> str:
    """Return the primary language subtag, lowercased.

    Examples::

        language("de")     # => "de"
        language("de-DE")  # => "de"
        language("en-GB")  # => "en"
    """
    return str(value).split("-")[0].lower()


def size(base: str, width: str) -> str:
    """Size attribute for the button; ``width="auto"`` enables auto width."""
    if width == "auto":
        return f"{base} auto"
    return base


def is_hidden(value: Any) -> bool:
    return bool(value) and value in HIDE_VALUES
