"""Jinja2 environment for subscribe_button templates."""

from __future__ import annotations

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

_ENV: Environment | None = None

_UNSAFE_SCRIPT_TEXT = re.compile(r"</script|<!--", re.IGNORECASE)


def _script_text(value: str | None) -> Markup:
    """Mark a script body safe, refusing text that could end the element early."""
    if not value:
        return Markup("")
    if _UNSAFE_SCRIPT_TEXT.search(str(value)):
        raise ValueError("Script body must not contain '</script' or '<!--'.")
    return Markup(str(value))


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        template_dir = Path(__file__).parent / "templates"
        loader = FileSystemLoader(str(template_dir))
        _ENV = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _ENV.filters["script_text"] = _script_text
    return _ENV
