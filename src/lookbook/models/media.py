"""Media field normalization.

The API stores project images and videos either as a single URL string or as
a JSON-encoded array whose entries are bare URLs or ``{url, description}``
objects. Everything past the model boundary sees ``list[MediaItem]``.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_YOUTUBE_RE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})"
)
_VIMEO_RE = re.compile(
    r"vimeo\.com/(?:channels/(?:\w+/)?|groups/(?:[^/]*)/videos/|album/(?:\d+)/video/|)(\d+)(?:$|/|\?)"
)


class MediaItem(BaseModel):
    """One image or video with an optional caption."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Image or video URL")
    caption: str | None = Field(default=None, description="Caption shown under the media")

    @property
    def embed_url(self) -> str:
        """Player URL for YouTube/Vimeo links, the plain URL otherwise."""
        return embed_url(self.url)


def embed_url(url: str) -> str:
    """Convert a YouTube or Vimeo watch URL to its embeddable player URL."""
    if not url:
        return url
    if match := _YOUTUBE_RE.search(url):
        return f"https://www.youtube.com/embed/{match.group(1)}"
    if match := _VIMEO_RE.search(url):
        return f"https://player.vimeo.com/video/{match.group(1)}"
    return url


def _coerce_item(item: Any) -> MediaItem | None:
    if isinstance(item, MediaItem):
        return item
    if isinstance(item, str):
        url = item.strip()
        return MediaItem(url=url) if url else None
    if isinstance(item, dict):
        url = str(item.get("url") or "").strip()
        if not url:
            return None
        caption = item.get("caption") or item.get("description") or None
        return MediaItem(url=url, caption=caption)
    return None


def normalize_media(value: Any) -> list[MediaItem]:
    """Normalize a polymorphic media value into an ordered list of items.

    Accepts None, a URL string, a JSON-encoded array (or object) string, a
    list, or a single dict. Unparseable JSON-looking strings are treated as
    a plain URL. The input is never modified.
    """
    if value is None:
        return []

    raw: list[Any]
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text[0] in "[{":
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                return [MediaItem(url=text)]
            raw = parsed if isinstance(parsed, list) else [parsed]
        else:
            return [MediaItem(url=text)]
    elif isinstance(value, (list, tuple)):
        raw = list(value)
    else:
        raw = [value]

    return [item for item in (_coerce_item(entry) for entry in raw) if item is not None]
