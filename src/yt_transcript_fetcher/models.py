"""
models.py — Plain data shapes produced by the transcript pipeline.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from yt_transcript_fetcher.metadata import VideoMetadata


@dataclass(frozen=True)
class CaptionTrack:
    """
    One caption stream listed by the Innertube player response.

    Attributes:
        language_code: Track language (e.g. "en", "pt-BR").
        name:          Display name YouTube shows in the captions menu.
        is_generated:  True for automatic speech recognition ("asr") tracks.
        base_url:      timedtext URL for the document; empty if YouTube gave none.
    """
    language_code: str
    name: str
    is_generated: bool
    base_url: str

    @classmethod
    def from_player_json(cls, raw: dict[str, Any]) -> CaptionTrack:
        name = raw.get("name") or {}
        if isinstance(name, dict):
            # Either {"simpleText": ...} or {"runs": [{"text": ...}, ...]}
            display = name.get("simpleText") or "".join(
                run.get("text", "") for run in name.get("runs", [])
            )
        else:
            display = str(name)
        return cls(
            language_code=raw.get("languageCode") or "",
            name=display,
            is_generated=raw.get("kind") == "asr",
            base_url=raw.get("baseUrl") or raw.get("url") or "",
        )


@dataclass(frozen=True)
class TranscriptSegment:
    """
    One timed caption line.

    Attributes:
        text:     Caption text with XML entities decoded.
        offset:   Start time in seconds.
        duration: Length in seconds.
        lang:     Language of the segment (requested tag or track language).
    """
    text: str
    offset: float
    duration: float
    lang: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranscriptSegment:
        return cls(
            text=str(data["text"]),
            offset=float(data["offset"]),
            duration=float(data["duration"]),
            lang=str(data["lang"]),
        )


@dataclass(frozen=True)
class TranscriptResult:
    """Transcript segments bundled with the video's metadata."""
    metadata: VideoMetadata
    segments: list[TranscriptSegment]

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "segments": [s.to_dict() for s in self.segments],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranscriptResult:
        return cls(
            metadata=VideoMetadata.from_dict(data["metadata"]),
            segments=[TranscriptSegment.from_dict(s) for s in data["segments"]],
        )
