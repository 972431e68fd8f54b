"""Orchestration of a single summarize run: reference -> transcript -> summary."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import EffectiveConfig
from .providers import ProviderClient
from .video_id import resolve_video_id

TranscriptFetcher = Callable[[str], str]
ClientFactory = Callable[[EffectiveConfig], ProviderClient]


class SummaryService:
    """Public facade used by the CLI.

    Stages run strictly in order and the first ``SummaryError`` propagates
    unchanged; nothing is recovered locally.
    """

    def __init__(
        self,
        config: EffectiveConfig,
        *,
        transcript_fetcher: TranscriptFetcher,
        client_factory: ClientFactory,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self._fetch_transcript = transcript_fetcher
        self._client_factory = client_factory
        self._logger = logger or logging.getLogger(__name__)

    def summarize(self, reference: str) -> str:
        self._logger.debug("URL: %s", reference)
        video_id = resolve_video_id(reference)

        self._logger.debug("Fetching transcript for %s...", video_id)
        transcript = self._fetch_transcript(video_id)
        self._logger.debug("Transcript fetched: %d chars", len(transcript))

        client = self._client_factory(self.config)
        try:
            return client.summarize(self.config, transcript)
        finally:
            client.close()
