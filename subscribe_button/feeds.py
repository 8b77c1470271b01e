"""Feed list preparation for the subscribe button."""

from __future__ import annotations

import hashlib
import json
import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .cache import CacheService, TemplateCache
from .models import HIGH_VARIANT, FeedRecord

logger = logging.getLogger(__name__)

CACHE_KEY = "podlove_subscribe_button_feeds"
ITUNES_DIRECTORY_URL = "https://itunes.apple.com/podcast/id"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_FORMATS = {
    "m4a": "aac",
    "oga": "ogg",
}


def feed_format(extension: str) -> str:
    """Map an enclosure file extension to the format name the widget expects."""
    return _FORMATS.get(extension, extension)


def _directory_id(value: Any) -> int:
    """Read a directory id the lenient way: ``"12abc"`` and ``"12.5"`` are 12."""
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


def _feed_inputs(feed: Any) -> dict:
    if isinstance(feed, FeedRecord):
        return feed.to_dict()
    if isinstance(feed, Mapping):
        return dict(feed)

    file_type = feed.episode_asset().file_type()
    return {
        "type": file_type.type,
        "extension": file_type.extension,
        "url": feed.get_subscribe_url(),
        "itunes_feed_id": _directory_id(getattr(feed, "itunes_feed_id", None)),
    }


def feed_record(feed: Any) -> FeedRecord:
    """Build the widget record for a single feed entity."""
    if isinstance(feed, FeedRecord):
        return feed
    if isinstance(feed, Mapping):
        return FeedRecord.from_dict(feed)

    inputs = _feed_inputs(feed)
    itunes_feed_id = inputs["itunes_feed_id"]
    return FeedRecord(
        type=inputs["type"],
        format=feed_format(inputs["extension"]),
        url=inputs["url"],
        variant=HIGH_VARIANT,
        directory_url_itunes=(
            f"{ITUNES_DIRECTORY_URL}{itunes_feed_id}" if itunes_feed_id > 0 else None
        ),
    )


def transform_feeds(feeds: Iterable[Any]) -> List[FeedRecord]:
    """Convert feed entities into widget records, keeping their order."""
    records = [feed_record(feed) for feed in feeds]
    logger.debug("Prepared %d feeds for subscribe button", len(records))
    return records


def cache_key(feeds: Sequence[Any]) -> str:
    """Derive a cache key from the feed inputs.

    Distinct feed lists get distinct keys, so memoized results of one
    podcast are never served for another.
    """
    inputs = [_feed_inputs(feed) for feed in feeds]
    digest = hashlib.sha256(
        json.dumps(inputs, sort_keys=True, default=str).encode("utf-8")
    ).hexdigest()
    return f"{CACHE_KEY}:{digest[:16]}"


def button_feeds(
    feeds: Iterable[Any],
    cache: Optional[CacheService] = None,
    key: Optional[str] = None,
) -> List[FeedRecord]:
    """Feed list, ready for the subscribe button.

    The result is memoized through ``cache`` (the shared
    :class:`TemplateCache` by default). Passing a fixed ``key`` shares one
    entry between every call using it, whatever the feeds are.
    """
    feeds = list(feeds)
    if cache is None:
        cache = TemplateCache.get_instance()
    key = key or cache_key(feeds)

    payload = cache.cache_for(
        key, lambda: [record.to_dict() for record in transform_feeds(feeds)]
    )
    return [FeedRecord.from_dict(item) for item in payload]
