"""
metadata.py — Video metadata projected from the Innertube player response.

The player request that lists caption tracks also returns a `videoDetails`
object (title, channel, duration, view count, ...).  When the caller asks
for details, this module turns that object into a VideoMetadata dataclass
so it can travel alongside the transcript segments.

The projection is best-effort: YouTube omits fields freely (live streams
have no duration, some videos have no keywords), so every missing value
falls back to an empty default instead of raising.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Thumbnail:
    """One thumbnail rendition (YouTube lists several sizes)."""
    url: str
    width: int
    height: int


@dataclass(frozen=True)
class VideoMetadata:
    """
    Structured metadata for a single YouTube video.

    frozen=True makes instances hashable and prevents accidental mutation
    after creation, which is why the sequence fields are tuples.

    Attributes:
        video_id:      The 11-character YouTube video identifier.
        title:         The video title as displayed on YouTube.
        author:        The channel's display name.
        channel_id:    YouTube's internal channel identifier (e.g. "UC...").
        duration_secs: Video length in seconds (0 when unknown).
        view_count:    View count at fetch time (0 when unknown).
        description:   Full video description.
        keywords:      Tags set by the uploader.
        thumbnails:    Available thumbnail renditions, smallest first.
        is_live:       True for live streams and premieres.
    """
    video_id: str
    title: str = ""
    author: str = ""
    channel_id: str = ""
    duration_secs: int = 0
    view_count: int = 0
    description: str = ""
    keywords: tuple[str, ...] = ()
    thumbnails: tuple[Thumbnail, ...] = ()
    is_live: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["keywords"] = list(self.keywords)
        data["thumbnails"] = [asdict(t) for t in self.thumbnails]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoMetadata:
        return cls(
            video_id=str(data["video_id"]),
            title=str(data.get("title", "")),
            author=str(data.get("author", "")),
            channel_id=str(data.get("channel_id", "")),
            duration_secs=int(data.get("duration_secs", 0)),
            view_count=int(data.get("view_count", 0)),
            description=str(data.get("description", "")),
            keywords=tuple(data.get("keywords", ())),
            thumbnails=tuple(Thumbnail(**t) for t in data.get("thumbnails", ())),
            is_live=bool(data.get("is_live", False)),
        )


# ---------------------------------------------------------------------------
# Projection from the player response
# ---------------------------------------------------------------------------

def _to_int(value: Any) -> int:
    # Innertube sends lengthSeconds / viewCount as strings.
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _thumbnails(details: dict[str, Any]) -> tuple[Thumbnail, ...]:
    thumbnail = details.get("thumbnail")
    raw = thumbnail.get("thumbnails") if isinstance(thumbnail, dict) else None
    if not isinstance(raw, list):
        return ()
    return tuple(
        Thumbnail(
            url=str(t.get("url", "")),
            width=_to_int(t.get("width")),
            height=_to_int(t.get("height")),
        )
        for t in raw
        if isinstance(t, dict)
    )


def parse_video_metadata(video_id: str, player_json: dict[str, Any]) -> VideoMetadata:
    """
    Build a VideoMetadata from an Innertube player response.

    Args:
        video_id:    The resolved video ID (used when videoDetails lacks one).
        player_json: The decoded JSON body of the player request.

    Returns:
        A VideoMetadata; fields YouTube didn't send take their defaults.
    """
    details = player_json.get("videoDetails")
    if not isinstance(details, dict):
        details = {}
    keywords = details.get("keywords")
    if not isinstance(keywords, list):
        keywords = []

    return VideoMetadata(
        video_id=details.get("videoId") or video_id,
        title=details.get("title") or "",
        author=details.get("author") or "",
        channel_id=details.get("channelId") or "",
        duration_secs=_to_int(details.get("lengthSeconds")),
        view_count=_to_int(details.get("viewCount")),
        description=details.get("shortDescription") or "",
        keywords=tuple(str(k) for k in keywords),
        thumbnails=_thumbnails(details),
        is_live=bool(details.get("isLiveContent", False)),
    )
