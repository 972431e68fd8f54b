"""OpenRouter backend: chat completions (choice-list responses) and model catalog."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..errors import ApiRequestError
from .base import ProviderClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pricing:
    """Per-token prices as reported by the catalog (usually decimal strings)."""

    prompt: Any
    completion: Any


@dataclass(frozen=True)
class ModelInfo:
    id: str
    name: str
    context_length: Optional[int] = None
    pricing: Optional[Pricing] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ModelInfo":
        model_id = payload["id"]
        if not isinstance(model_id, str):
            raise ValueError("model 'id' is not a string")
        name = payload.get("name")
        context_length = payload.get("context_length")
        if isinstance(context_length, bool) or not isinstance(context_length, int):
            context_length = None
        pricing = payload.get("pricing")
        return cls(
            id=model_id,
            name=name if isinstance(name, str) else model_id,
            context_length=context_length,
            pricing=(
                Pricing(prompt=pricing.get("prompt"), completion=pricing.get("completion"))
                if isinstance(pricing, Mapping)
                else None
            ),
        )


class OpenRouterClient(ProviderClient):
    """Co-ordinates requests to OpenRouter's chat completions and models endpoints."""

    name = "OpenRouter"
    default_base_url = "https://openrouter.ai/api/v1"
    chat_path = "/chat/completions"
    models_path = "/models"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        *,
        referer: Optional[str] = None,
        title: Optional[str] = None,
        timeout: float = ProviderClient._DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.referer = referer
        self.title = title
        super().__init__(api_key, base_url, timeout=timeout, transport=transport)

    def _auth_headers(self) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers

    def _extract_text(self, data: Any) -> List[str]:
        choices = data["choices"]
        if not isinstance(choices, list):
            raise ValueError("response 'choices' is not a list")
        fragments = []
        for choice in choices:
            content = choice["message"]["content"]
            if not isinstance(content, str):
                raise ValueError("choice message 'content' is not a string")
            fragments.append(content)
        return fragments

    # ------------------------------
    # Model metadata
    # ------------------------------
    def fetch_models(self) -> List[ModelInfo]:
        """Fetch the full model catalog. Never cached."""
        logger.debug("Fetching models from %s API...", self.name)
        response = self._send("GET", self.models_path, "Failed to fetch models")
        self._raise_for_status(response)

        try:
            data = response.json()
            models = data["data"]
            if not isinstance(models, list):
                raise ValueError("response 'data' is not a list")
            return [ModelInfo.from_payload(model) for model in models]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ApiRequestError(f"Failed to parse models response: {exc}") from exc
