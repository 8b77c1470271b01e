"""Subscribe button rendering.

Usage::

    renderer = ButtonRenderer(config)
    data = content_for_podcast(podcast)
    html = renderer.render(data, podcast_args(podcast, {"size": "medium"}))
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from . import db
from .cache import CacheService, TemplateCache
from .config import ConfigSource, ModuleConfig, configure_logging, parse_module_config
from .embed import build_embed_code, script_source
from .feeds import button_feeds
from .identifiers import IdentifierGenerator, random_token
from .models import ContentData, FeedRecord, Podcast, RenderOptions
from .registry import DEFAULT_REGISTRY, WhitelistRegistry
from .sanitizer import language, sanitize

logger = logging.getLogger(__name__)

Args = Union[RenderOptions, Mapping[str, Any], None]


class ButtonRenderer:
    """Turns podcast data and button options into embeddable markup."""

    def __init__(
        self,
        config: Optional[ConfigSource] = None,
        registry: WhitelistRegistry = DEFAULT_REGISTRY,
        cache: Optional[CacheService] = None,
        id_generator: IdentifierGenerator = random_token,
    ):
        self.config = config
        self.registry = registry
        self.cache = cache
        self.id_generator = id_generator

    @classmethod
    def from_config(cls, config: ModuleConfig, **kwargs: Any) -> "ButtonRenderer":
        """Build a renderer, backing its cache with the configured database."""
        if "cache" not in kwargs and config.database.enabled:
            engine = db.init_engine(config.database.connection_string)
            kwargs["cache"] = TemplateCache(db.get_session_factory(engine))
        return cls(config=config, **kwargs)

    def options(self, args: Args = None) -> RenderOptions:
        if isinstance(args, RenderOptions):
            options = args
        else:
            options = RenderOptions.from_args(args)
        return sanitize(options, self.registry)

    def render(self, content: ContentData, args: Args = None) -> str:
        options = self.options(args)
        content = content.with_overrides(options)

        feeds = list(content.feeds)
        if not all(isinstance(feed, FeedRecord) for feed in feeds):
            feeds = button_feeds(feeds, cache=self.cache)
        content.feeds = feeds

        if not feeds:
            logger.debug("No feeds available; skipping subscribe button")
            return ""

        return build_embed_code(
            content, options, self.id_generator(), script_source(self.config)
        )


def content_for_podcast(
    podcast: Podcast, cache: Optional[CacheService] = None
) -> ContentData:
    """Content data for a podcast, limited to its discoverable feeds."""
    return ContentData(
        title=podcast.title,
        subtitle=podcast.subtitle,
        description=podcast.summary,
        cover=podcast.cover_url,
        feeds=button_feeds(podcast.discoverable_feeds(), cache=cache),
    )


def podcast_args(
    podcast: Podcast, args: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Button arguments defaulting the language to the podcast's own."""
    merged = dict(args or {})
    if podcast.language and not merged.get("language"):
        merged["language"] = language(podcast.language)
    return merged


def renderer_from_file(path: str, **kwargs: Any) -> ButtonRenderer:
    """Load module configuration, set up logging and return a renderer."""
    config = parse_module_config(path)
    configure_logging(config.logging.level, config.logging.file)
    logger.info(
        "Subscribe button configured (use_cdn=%s, database=%s)",
        config.use_cdn,
        config.database.enabled,
    )
    return ButtonRenderer.from_config(config, **kwargs)
