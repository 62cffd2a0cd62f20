"""Parsing of caption payloads into transcript segments.

Two shapes are accepted:
- JSON3 timed text, as served for video captions:
  {"events": [{"tStartMs": 0, "dDurationMs": 1500, "segs": [{"utf8": "..."}]}]}
- A plain segment list: [{"text": "...", "offset": 0, "duration": 1500}]

Fetching the payload is the caller's job; this module only parses.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from describe_ingest.ingest.transcript.models import TranscriptSegment

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERNS = (
    re.compile(
        r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/)"
        r"([a-zA-Z0-9_-]{11})"
    ),
    re.compile(r"^([a-zA-Z0-9_-]{11})$"),  # Bare video ID
)


def extract_video_id(url: str) -> str | None:
    """Extract the 11-character video ID from a URL or bare ID.

    Examples:
        >>> extract_video_id("https://youtu.be/dQw4w9WgXcQ")
        'dQw4w9WgXcQ'
        >>> extract_video_id("not a video") is None
        True
    """
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def _as_ms(value: Any) -> int:
    """Coerce a timing field (int or numeric string) to ms; missing is 0."""
    if value is None or value == "":
        return 0
    return max(0, int(float(value)))


def parse_timed_text(payload: dict[str, Any]) -> list[TranscriptSegment]:
    """Convert a JSON3 timed-text payload into segments.

    Event texts are concatenated, newlines become spaces and the result is
    trimmed. Events without text are skipped.

    Args:
        payload: Decoded JSON3 document

    Returns:
        Segments in event order

    Raises:
        ValueError: If the payload has no "events" list, or an event or
            one of its segs is not an object
    """
    events = payload.get("events")
    if not isinstance(events, list):
        raise ValueError("timed-text payload has no 'events' list")

    segments: list[TranscriptSegment] = []
    for position, event in enumerate(events):
        if not isinstance(event, dict):
            raise ValueError(f"timed-text event {position} is not an object")
        segs = event.get("segs")
        if not segs:
            continue
        if not isinstance(segs, list) or not all(isinstance(s, dict) for s in segs):
            raise ValueError(f"timed-text event {position} has malformed segs")
        text = "".join(s.get("utf8") or "" for s in segs).replace("\n", " ").strip()
        if not text:
            continue
        segments.append(
            TranscriptSegment(
                text=text,
                offset=_as_ms(event.get("tStartMs")),
                duration=_as_ms(event.get("dDurationMs")),
            )
        )

    logger.debug(f"Parsed {len(segments)} segments from {len(events)} timed-text events")
    return segments


def parse_segment_list(items: list[dict[str, Any]]) -> list[TranscriptSegment]:
    """Convert plain {text, offset, duration} records into segments.

    Raises:
        ValueError: If a record has no text field
    """
    segments: list[TranscriptSegment] = []
    for position, item in enumerate(items):
        if not isinstance(item, dict) or "text" not in item:
            raise ValueError(f"segment {position} has no 'text' field")
        segments.append(
            TranscriptSegment(
                text=str(item["text"]).replace("\n", " ").strip(),
                offset=_as_ms(item.get("offset")),
                duration=_as_ms(item.get("duration")),
            )
        )
    return segments


def parse_transcript_payload(payload: Any) -> list[TranscriptSegment]:
    """Parse either supported payload shape.

    Raises:
        ValueError: If the payload matches neither shape
    """
    if isinstance(payload, dict):
        return parse_timed_text(payload)
    if isinstance(payload, list):
        return parse_segment_list(payload)
    raise ValueError(f"unsupported transcript payload type: {type(payload).__name__}")
