import logging

import pytest

from subscribe_button.models import RenderOptions
from subscribe_button.registry import DEFAULT_REGISTRY, WhitelistRegistry
from subscribe_button.sanitizer import is_hidden, language, sanitize, size


def test_from_args_merges_over_defaults():
    options = RenderOptions.from_args({"size": "medium", "buttonId": "btn", "unknown": 1, "color": None})

    assert options.size == "medium"
    assert options.buttonid == "btn"
    assert options.format == "cover"
    assert options.style == "filled"
    assert options.language == "en"
    assert options.color == "#75ad91"
    assert options.hide is False


def test_from_args_without_arguments_returns_defaults():
    assert RenderOptions.from_args(None) == RenderOptions()
    assert RenderOptions.from_args({}) == RenderOptions()


@pytest.mark.parametrize(
    "args",
    [
        {"size": "huge", "style": "neon", "format": "circle"},
        {"size": 3, "style": ["filled"], "format": ""},
        {"size": "<script>", "style": "filled\"", "format": "COVER"},
    ],
)
def test_sanitize_replaces_values_outside_whitelist(args):
    options = sanitize(RenderOptions.from_args(args))

    assert options.size in DEFAULT_REGISTRY.sizes
    assert options.style in DEFAULT_REGISTRY.styles
    assert options.format in DEFAULT_REGISTRY.formats
    assert (options.size, options.style, options.format) == ("big", "filled", "cover")


def test_sanitize_keeps_whitelisted_values():
    original = RenderOptions.from_args({"size": "big-logo", "style": "outline", "format": "square", "width": "auto"})

    assert sanitize(original) is original


def test_sanitize_uses_given_registry():
    registry = WhitelistRegistry(sizes={"tiny": "Tiny"}, styles={"filled": "Filled"}, formats={"cover": "Cover"})

    assert sanitize(RenderOptions(size="tiny"), registry).size == "tiny"
    assert sanitize(RenderOptions(size="medium"), registry).size == "big"


def test_sanitize_leaves_free_fields_untouched():
    options = sanitize(RenderOptions(width="300px", color="red", buttonid="x", language="de-DE", hide="on"))

    assert (options.width, options.color, options.buttonid, options.language, options.hide) == (
        "300px",
        "red",
        "x",
        "de-DE",
        "on",
    )


def test_sanitize_logs_substitution(caplog):
    caplog.set_level(logging.DEBUG, logger="subscribe_button.sanitizer")

    sanitize(RenderOptions(size="huge"))

    assert "Invalid size 'huge'" in caplog.text


@pytest.mark.parametrize(
    "value, expected",
    [("de", "de"), ("de-DE", "de"), ("en-GB", "en"), ("EN", "en"), ("pt-br", "pt")],
)
def test_language_keeps_primary_subtag(value, expected):
    assert language(value) == expected


def test_size_appends_auto_only_for_auto_width():
    assert size("medium", "auto") == "medium auto"
    assert size("medium", "") == "medium"
    assert size("medium", "anything-else") == "medium"
    assert size("medium", "AUTO") == "medium"


@pytest.mark.parametrize("value", [True, "true", "1", 1, "on"])
def test_is_hidden_accepts_truthy_representations(value):
    assert is_hidden(value) is True


@pytest.mark.parametrize("value", [False, None, 0, "", "0", "false", "off", "yes", 2, []])
def test_is_hidden_rejects_everything_else(value):
    assert is_hidden(value) is False
