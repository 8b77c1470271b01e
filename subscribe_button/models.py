"""Shared data models for subscribe_button."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

HIGH_VARIANT = "high"
OVERRIDABLE_FIELDS = ("title", "subtitle", "description", "cover")


@dataclass(frozen=True)
class RenderOptions:
    """Rendering options for a single button."""

    size: str = "big"
    format: str = "cover"
    width: str = ""
    style: str = "filled"
    language: str = "en"
    color: str = "#75ad91"
    buttonid: Optional[str] = None
    hide: Any = False
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    cover: Optional[str] = None

    @classmethod
    def from_args(cls, args: Optional[Mapping[str, Any]] = None) -> "RenderOptions":
        """Merge caller arguments over the defaults.

        Keys are matched case-insensitively so shortcode style ``buttonId``
        works as well. Unknown keys and ``None`` values are ignored.
        """
        if not args:
            return cls()

        known = {f.name for f in dataclasses.fields(cls)}
        values = {}
        for key, value in args.items():
            name = str(key).lower()
            if name in known and value is not None:
                values[name] = value
        return cls(**values)


@dataclass(frozen=True)
class FeedRecord:
    """Feed entry as consumed by the widget application."""

    type: str
    format: str
    url: str
    variant: str = HIGH_VARIANT
    directory_url_itunes: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {
            "type": self.type,
            "format": self.format,
            "url": self.url,
            "variant": self.variant,
        }
        if self.directory_url_itunes:
            data["directory-url-itunes"] = self.directory_url_itunes
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeedRecord":
        return cls(
            type=data.get("type", ""),
            format=data.get("format", ""),
            url=data.get("url", ""),
            variant=data.get("variant", HIGH_VARIANT),
            directory_url_itunes=data.get("directory-url-itunes"),
        )


@dataclass
class ContentData:
    """Podcast data serialized into the embed snippet."""

    title: str = ""
    subtitle: str = ""
    description: str = ""
    cover: str = ""
    feeds: Sequence[Any] = field(default_factory=list)

    def with_overrides(self, options: RenderOptions) -> "ContentData":
        """Return a copy with non-empty option fields taking precedence."""
        overrides = {}
        for name in OVERRIDABLE_FIELDS:
            value = getattr(options, name)
            if value:
                overrides[name] = value
        return dataclasses.replace(self, **overrides)

    def to_payload(self) -> Dict[str, Any]:
        feeds = [
            feed.to_dict() if isinstance(feed, FeedRecord) else dict(feed)
            for feed in self.feeds
        ]
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "cover": self.cover,
            "feeds": feeds,
        }


class FileTypeLike(Protocol):
    type: str
    extension: str


class AssetLike(Protocol):
    def file_type(self) -> FileTypeLike: ...


class FeedSource(Protocol):
    """Domain feed entity as provided by the host application."""

    itunes_feed_id: Any

    def episode_asset(self) -> AssetLike: ...

    def get_subscribe_url(self) -> str: ...


@dataclass
class FileType:
    type: str
    extension: str


@dataclass
class EpisodeAsset:
    title: str
    type: FileType

    def file_type(self) -> FileType:
        return self.type


@dataclass
class Feed:
    """Simple feed entity implementing :class:`FeedSource`."""

    asset: EpisodeAsset
    subscribe_url: str
    itunes_feed_id: Any = None
    discoverable: bool = True

    def episode_asset(self) -> EpisodeAsset:
        return self.asset

    def get_subscribe_url(self) -> str:
        return self.subscribe_url


@dataclass
class Podcast:
    """Podcast metadata needed to render a subscribe button."""

    title: str
    subtitle: str = ""
    summary: str = ""
    cover_url: str = ""
    language: Optional[str] = None
    feeds: List[Feed] = field(default_factory=list)

    def discoverable_feeds(self) -> List[Feed]:
        return [feed for feed in self.feeds if feed.discoverable]
