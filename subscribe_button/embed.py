"""Embed code assembly for the subscribe button."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from jinja2.utils import htmlsafe_json_dumps

from .config import ConfigSource
from .models import ContentData, RenderOptions
from .sanitizer import is_hidden, language, size
from .templating import get_environment

logger = logging.getLogger(__name__)

ACCESSOR_PREFIX = "podcastData"
BUTTON_CLASS = "podlove-subscribe-button"
CDN_SCRIPT_URL = "https://cdn.podlove.org/subscribe-button/javascripts/app.js"
LOCAL_SCRIPT_PATH = "/dist/javascripts/app.js"

_JS_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


@dataclass(frozen=True)
class ScriptElement:
    """A ``<script>`` element; attributes set to ``None`` are left out."""

    attributes: Mapping[str, Any] = field(default_factory=dict)
    body: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True)
class EmbedCode:
    data_element: ScriptElement
    loader_element: ScriptElement

    def render(self) -> str:
        template = get_environment().get_template("embed.html.j2")
        return template.render(elements=[self.data_element, self.loader_element])


def accessor_name(identifier: str) -> str:
    """Global variable name carrying the data for one button."""
    name = f"{ACCESSOR_PREFIX}{identifier}"
    if not _JS_IDENTIFIER.fullmatch(name):
        raise ValueError(f"Invalid accessor identifier: {identifier!r}")
    return name


def script_source(config: Optional[ConfigSource]) -> str:
    """URL of the widget application, from the CDN unless configured otherwise."""
    if config is None or config.get_option("use_cdn", True):
        return CDN_SCRIPT_URL
    return config.get_base_url().rstrip("/") + LOCAL_SCRIPT_PATH


def data_element(accessor: str, content: ContentData) -> ScriptElement:
    payload = htmlsafe_json_dumps(content.to_payload())
    return ScriptElement(body=f"window.{accessor} = {payload};")


def loader_element(accessor: str, options: RenderOptions, src: str) -> ScriptElement:
    return ScriptElement(
        attributes={
            "class": BUTTON_CLASS,
            "src": src,
            "data-json-data": accessor,
            "data-language": language(options.language),
            "data-size": size(options.size, options.width),
            "data-format": options.format,
            "data-style": options.style,
            "data-color": options.color,
            "data-buttonid": options.buttonid or None,
            "data-hide": "1" if is_hidden(options.hide) else None,
        },
        # a non-empty body keeps the closing tag
        body=" ",
    )


def build_embed_code(
    content: ContentData, options: RenderOptions, identifier: str, src: str
) -> str:
    """Return the data and loader script tags, or ``""`` without feeds."""
    if not content.feeds:
        return ""

    accessor = accessor_name(identifier)
    code = EmbedCode(
        data_element=data_element(accessor, content),
        loader_element=loader_element(accessor, options, src),
    )
    logger.debug("Built embed code for %s with %d feeds", accessor, len(content.feeds))
    return code.render()
