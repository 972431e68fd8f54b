"""Filtering and table rendering for the OpenRouter model catalog."""
from __future__ import annotations

import logging
import math
import sys
from typing import Any, Iterable, List, Optional, TextIO

from .openrouter_client import ModelInfo, OpenRouterClient, Pricing

ID_WIDTH = 44
NAME_WIDTH = 39
NOT_AVAILABLE = "N/A"

logger = logging.getLogger(__name__)


def filter_models(models: Iterable[ModelInfo], search: Optional[str] = None) -> List[ModelInfo]:
    """Keep models whose id or name contains ``search``, ignoring case."""
    if not search:
        return list(models)
    term = search.lower()
    return [model for model in models if term in model.id.lower() or term in model.name.lower()]


def format_context(context_length: Optional[int]) -> str:
    if context_length is None:
        return NOT_AVAILABLE
    if context_length >= 1_000_000:
        return f"{context_length // 1_000_000}M"
    if context_length >= 1_000:
        return f"{context_length // 1_000}k"
    return str(context_length)


def parse_price_per_million(price: Any) -> Optional[float]:
    """Convert a per-token price to dollars per million tokens.

    Negative prices mark free or special models and, like unparseable
    values, yield ``None``.
    """
    try:
        value = float(price)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value * 1_000_000


def format_pricing(pricing: Optional[Pricing]) -> str:
    if pricing is None:
        return NOT_AVAILABLE
    prompt = parse_price_per_million(pricing.prompt)
    completion = parse_price_per_million(pricing.completion)
    if prompt is None or completion is None:
        return NOT_AVAILABLE
    return f"${prompt:.2f} / ${completion:.2f}"


def truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return f"{value[:max_len - 3]}..."


def format_model_table(models: Iterable[ModelInfo]) -> tuple[str, list[str]]:
    header = (
        f"{'MODEL ID':<{ID_WIDTH + 1}} "
        f"{'NAME':<{NAME_WIDTH + 1}} "
        f"{'CONTEXT':>8}   PRICING (per 1M tokens)"
    )
    lines: list[str] = []
    for model in models:
        line = (
            f"{truncate(model.id, ID_WIDTH):<{ID_WIDTH + 1}} "
            f"{truncate(model.name, NAME_WIDTH):<{NAME_WIDTH + 1}} "
            f"{format_context(model.context_length):>8}   "
            f"{format_pricing(model.pricing)}"
        )
        lines.append(line)
    return header, lines


def list_models(
    client: OpenRouterClient,
    search: Optional[str] = None,
    *,
    out: Optional[TextIO] = None,
) -> int:
    """Print the catalog, optionally filtered; return the number of models shown.

    Finding nothing is not an error: a notice is printed instead.
    """
    out = out or sys.stdout
    models = filter_models(client.fetch_models(), search)

    if not models:
        if search:
            print(f"No models found matching '{search}'", file=out)
        else:
            print("No models found", file=out)
        return 0

    header, lines = format_model_table(models)
    print(header, file=out)
    print("-" * 120, file=out)
    for line in lines:
        print(line, file=out)

    logger.debug("Total models displayed: %d", len(models))
    return len(models)
