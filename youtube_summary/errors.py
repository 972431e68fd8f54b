"""Error taxonomy shared by every stage of the summary pipeline."""
from __future__ import annotations


class SummaryError(RuntimeError):
    """Base error raised for any failure that aborts a run."""

    label = "Error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.label}: {self.detail}"


class InvalidReferenceError(SummaryError):
    """Raised when no video ID can be extracted from the user's input."""

    label = "Invalid YouTube URL"


class TranscriptFetchError(SummaryError):
    """Raised when the transcript is unavailable or empty."""

    label = "Failed to fetch transcript"


class ApiRequestError(SummaryError):
    """Raised for transport, HTTP and payload failures talking to a provider."""

    label = "API request failed"


class ConfigError(SummaryError):
    """Raised when settings cannot be read or no API key is available."""

    label = "Configuration error"
