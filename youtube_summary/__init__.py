"""Summarize YouTube videos from their transcripts with an LLM."""
from __future__ import annotations

from .config import CliOverrides, EffectiveConfig, ProcessSettingsSource, resolve_api_key, resolve_config
from .errors import (
    ApiRequestError,
    ConfigError,
    InvalidReferenceError,
    SummaryError,
    TranscriptFetchError,
)
from .service import SummaryService
from .video_id import resolve_video_id

__version__ = "0.1.0"

__all__ = [
    "CliOverrides",
    "EffectiveConfig",
    "ProcessSettingsSource",
    "resolve_api_key",
    "resolve_config",
    "resolve_video_id",
    "SummaryService",
    "SummaryError",
    "InvalidReferenceError",
    "TranscriptFetchError",
    "ApiRequestError",
    "ConfigError",
]
