"""Shared HTTP plumbing and error classification for LLM providers."""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

import httpx

from ..errors import ApiRequestError

if TYPE_CHECKING:
    from ..config import EffectiveConfig

MAX_OUTPUT_TOKENS = 4096
TRANSCRIPT_SEPARATOR = "\n\n---\n\nTranscript:\n"

logger = logging.getLogger(__name__)


def build_messages(prompt: str, transcript: str) -> List[Dict[str, str]]:
    return [{"role": "user", "content": f"{prompt}{TRANSCRIPT_SEPARATOR}{transcript}"}]


def build_request_body(model: str, prompt: str, transcript: str) -> Dict[str, Any]:
    return {
        "model": model,
        "max_tokens": MAX_OUTPUT_TOKENS,
        "messages": build_messages(prompt, transcript),
    }


def describe_status(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


def error_message_from_body(body: str) -> Optional[str]:
    """Return ``error.message`` from a provider error envelope, if the body has one."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, Mapping):
        return None
    error = data.get("error")
    if not isinstance(error, Mapping):
        return None
    message = error.get("message")
    return message if isinstance(message, str) else None


class ProviderClient:
    """Sends one summarization request and maps failures onto ``ApiRequestError``.

    Subclasses supply the endpoint, auth headers and ``_extract_text`` for
    their response shape. There are no retries: the first failure is final.
    """

    name = "provider"
    default_base_url = ""
    chat_path = ""

    _DEFAULT_TIMEOUT = 120.0

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ApiRequestError(f"{self.name} API key is required")

        self.api_key = api_key
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.timeout = timeout

        headers = {"Content-Type": "application/json"}
        headers.update(self._auth_headers())
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ProviderClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _auth_headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def _extract_text(self, data: Any) -> List[str]:
        """Return the text fragments of a successful response, in order."""
        raise NotImplementedError

    # ------------------------------
    # Summaries
    # ------------------------------
    def summarize(self, config: "EffectiveConfig", transcript: str) -> str:
        payload = build_request_body(config.model, config.prompt, transcript)
        logger.debug("Model: %s", config.model)
        logger.debug("Transcript length: %d chars", len(transcript))
        logger.debug("Sending request to %s API...", self.name)

        response = self._send("POST", self.chat_path, "Failed to send request", json=payload)
        self._raise_for_status(response)

        try:
            fragments = self._extract_text(response.json())
        except (ValueError, KeyError, TypeError) as exc:
            raise ApiRequestError(f"Failed to parse response: {exc}") from exc

        text = "\n".join(fragments)
        logger.debug("Response received: %d chars", len(text))
        return text

    # ------------------------------
    # HTTP helpers
    # ------------------------------
    def _send(self, method: str, path: str, failure: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiRequestError(f"{failure}: {exc}") from exc

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = response.text
        message = error_message_from_body(body)
        raise ApiRequestError(
            f"API error ({describe_status(response)}): {message if message is not None else body}"
        )
