"""Anthropic Messages API backend (content-block responses)."""
from __future__ import annotations

from typing import Any, Dict, List

from .base import ProviderClient

API_VERSION = "2023-06-01"


class AnthropicClient(ProviderClient):
    """Summarizes through ``POST /v1/messages``."""

    name = "Anthropic"
    default_base_url = "https://api.anthropic.com/v1"
    chat_path = "/messages"

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
        }

    def _extract_text(self, data: Any) -> List[str]:
        content = data["content"]
        if not isinstance(content, list):
            raise ValueError("response 'content' is not a list")
        fragments = []
        for block in content:
            text = block["text"]
            if not isinstance(text, str):
                raise ValueError("content block 'text' is not a string")
            fragments.append(text)
        return fragments
