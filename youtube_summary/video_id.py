"""Helpers for turning user-supplied YouTube references into video IDs."""
from __future__ import annotations

from typing import Optional

from .errors import InvalidReferenceError

VIDEO_ID_LENGTH = 11

# (substring that must be present, marker the ID follows)
_URL_MARKERS = (
    ("youtube.com/watch", "v="),
    ("youtu.be/", "youtu.be/"),
    ("youtube.com/embed/", "/embed/"),
)


def _is_id_char(ch: str) -> bool:
    return ch.isalnum() or ch in "-_"


def is_video_id(value: str) -> bool:
    return len(value) == VIDEO_ID_LENGTH and all(_is_id_char(ch) for ch in value)


def _take_id_after(reference: str, marker: str) -> Optional[str]:
    start = reference.find(marker)
    if start == -1:
        return None
    chars = []
    for ch in reference[start + len(marker):]:
        if not _is_id_char(ch):
            break
        chars.append(ch)
    candidate = "".join(chars)
    return candidate if len(candidate) == VIDEO_ID_LENGTH else None


def resolve_video_id(reference: str) -> str:
    """Return the 11-character video ID for a bare ID or a watch/short/embed URL.

    Extraction stops at the first character that cannot be part of an ID, so
    trailing query parameters are ignored. A longer run of ID characters is
    rejected rather than truncated.
    """
    stripped = reference.strip()
    if is_video_id(stripped):
        return stripped

    for needle, marker in _URL_MARKERS:
        if needle not in stripped:
            continue
        video_id = _take_id_after(stripped, marker)
        if video_id:
            return video_id

    raise InvalidReferenceError(f"Could not extract video ID from: {stripped}")
