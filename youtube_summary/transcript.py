"""Transcript retrieval via youtube-transcript-api."""
from __future__ import annotations

import logging
from typing import Sequence

from youtube_transcript_api import CouldNotRetrieveTranscript, YouTubeTranscriptApi

from .errors import TranscriptFetchError

DEFAULT_LANGUAGES = ("en",)

logger = logging.getLogger(__name__)


def fetch_transcript(video_id: str, languages: Sequence[str] = DEFAULT_LANGUAGES) -> str:
    """Return the transcript snippets of ``video_id`` joined into one string."""
    try:
        fetched = YouTubeTranscriptApi().fetch(video_id, languages=list(languages))
        text = " ".join(snippet.text for snippet in fetched)
    except (CouldNotRetrieveTranscript, OSError) as exc:
        raise TranscriptFetchError(f"Failed to fetch transcript: {exc}") from exc

    if not text:
        raise TranscriptFetchError("Transcript is empty")
    return text
