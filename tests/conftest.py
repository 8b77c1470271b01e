import itertools
import logging

import pytest

from subscribe_button.cache import TemplateCache
from subscribe_button.models import ContentData, EpisodeAsset, Feed, FileType


def _make_feed(extension="mp3", url="https://example.com/feed/mp3", itunes_feed_id=None, mime="audio/mpeg", discoverable=True):
    return Feed(
        asset=EpisodeAsset(title=extension.upper(), type=FileType(type=mime, extension=extension)),
        subscribe_url=url,
        itunes_feed_id=itunes_feed_id,
        discoverable=discoverable,
    )


@pytest.fixture
def make_feed():
    return _make_feed


@pytest.fixture
def restore_logging():
    """Put the root and package loggers back the way the test found them."""
    saved = []
    for name in (None, "subscribe_button"):
        log = logging.getLogger(name)
        saved.append((log, log.handlers[:], log.level))
    yield
    for log, handlers, level in saved:
        for handler in log.handlers[:]:
            if handler not in handlers:
                log.removeHandler(handler)
                handler.close()
        for handler in handlers:
            if handler not in log.handlers:
                log.addHandler(handler)
        log.setLevel(level)


@pytest.fixture
def cache():
    return TemplateCache()


@pytest.fixture
def sequential_ids():
    """Deterministic identifier generator yielding id0, id1, ..."""
    counter = itertools.count()
    return lambda: f"id{next(counter)}"


@pytest.fixture
def feeds():
    return [
        _make_feed("mp3", "https://example.com/feed/mp3", itunes_feed_id="12345"),
        _make_feed("m4a", "https://example.com/feed/m4a", mime="audio/mp4"),
        _make_feed("oga", "https://example.com/feed/oga", mime="audio/ogg", itunes_feed_id=0),
    ]


@pytest.fixture
def content(feeds):
    return ContentData(
        title="Example Podcast",
        subtitle="All about examples",
        description="A show about examples.",
        cover="https://example.com/cover.jpg",
        feeds=feeds,
    )
