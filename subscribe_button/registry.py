"""Legal values for the enumerated button options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


def _default_sizes() -> Mapping[str, str]:
    return {
        "small": "Small",
        "medium": "Medium",
        "big": "Big",
        "big-logo": "Big with logo",
    }


def _default_styles() -> Mapping[str, str]:
    return {
        "filled": "Filled",
        "outline": "Outline",
        "frameless": "Frameless",
    }


def _default_formats() -> Mapping[str, str]:
    return {
        "rectangle": "Rectangle",
        "square": "Square",
        "cover": "Cover",
    }


@dataclass(frozen=True)
class WhitelistRegistry:
    """Identifier to label mappings for sizes, styles and formats."""

    sizes: Mapping[str, str] = field(default_factory=_default_sizes)
    styles: Mapping[str, str] = field(default_factory=_default_styles)
    formats: Mapping[str, str] = field(default_factory=_default_formats)


DEFAULT_REGISTRY = WhitelistRegistry()
