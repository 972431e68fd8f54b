"""Shared exports for the LLM provider backends."""
from __future__ import annotations

from .anthropic_client import AnthropicClient
from .base import MAX_OUTPUT_TOKENS, TRANSCRIPT_SEPARATOR, ProviderClient, build_request_body
from .catalog import filter_models, format_context, format_pricing, list_models, truncate
from .openrouter_client import ModelInfo, OpenRouterClient, Pricing


__all__ = [
    "ProviderClient",
    "AnthropicClient",
    "OpenRouterClient",
    "ModelInfo",
    "Pricing",
    "MAX_OUTPUT_TOKENS",
    "TRANSCRIPT_SEPARATOR",
    "build_request_body",
    "filter_models",
    "format_context",
    "format_pricing",
    "list_models",
    "truncate",
]
