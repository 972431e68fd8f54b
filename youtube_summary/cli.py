from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import (
    DEFAULT_MODELS,
    PROVIDER_ANTHROPIC,
    PROVIDER_OPENROUTER,
    PROVIDERS,
    CliOverrides,
    EffectiveConfig,
    ProcessSettingsSource,
    SettingsSource,
    resolve_api_key,
    resolve_config,
)
from .errors import ConfigError, SummaryError
from .providers import AnthropicClient, OpenRouterClient, ProviderClient, list_models
from .service import SummaryService
from .transcript import fetch_transcript

PROG = "youtube-summary"
OPENROUTER_TITLE = "youtube-summary"


class UsageError(ValueError):
    """Raised for malformed command lines."""


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("youtube_summary")
    if verbose and not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[verbose] %(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_client(config: EffectiveConfig) -> ProviderClient:
    if config.provider == PROVIDER_ANTHROPIC:
        return AnthropicClient(config.api_key)
    return OpenRouterClient(config.api_key, title=OPENROUTER_TITLE)


def build_parser() -> argparse.ArgumentParser:
    p = ArgumentParser(
        prog=PROG,
        description="Fetch a YouTube transcript and summarize it with an LLM.",
        allow_abbrev=False,
        epilog=(
            "Examples:\n"
            f'  {PROG} "https://youtube.com/watch?v=VIDEO_ID"\n'
            f'  {PROG} "https://youtube.com/watch?v=VIDEO_ID" -p "Is this worth watching?"\n'
            f"  {PROG} -l claude"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("url", nargs="?", metavar="URL", help="YouTube video URL or 11-character video ID")
    p.add_argument("-p", "--prompt", help="Custom prompt for the summary")
    p.add_argument(
        "-m",
        "--model",
        help=(
            f"Model identifier (default: {DEFAULT_MODELS[PROVIDER_OPENROUTER]}; "
            "haiku, sonnet and opus are accepted with --provider anthropic)"
        ),
    )
    p.add_argument("-k", "--api-key", help="API key (overrides env, credentials and config file)")
    p.add_argument("-c", "--config", type=Path, help="Path to config file (default: ~/.config/youtube-summary/config)")
    p.add_argument(
        "--provider",
        choices=PROVIDERS,
        default=PROVIDER_OPENROUTER,
        help="LLM provider to use (default: openrouter)",
    )
    p.add_argument(
        "-l",
        "--list-models",
        nargs="?",
        const="",
        metavar="SEARCH",
        help="List available OpenRouter models, optionally filtered by SEARCH",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Show verbose output on stderr")
    return p


def parse_args(parser: argparse.ArgumentParser, argv: Optional[Sequence[str]]) -> argparse.Namespace:
    args, extras = parser.parse_known_args(argv)
    if extras:
        raise UsageError(f"Unknown argument: {extras[0]}")
    return args


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    return CliOverrides(
        api_key=args.api_key,
        model=args.model,
        prompt=args.prompt,
        config_path=args.config,
        verbose=args.verbose,
        provider=args.provider,
    )


def handle_list_models(args: argparse.Namespace, source: SettingsSource) -> int:
    if args.provider != PROVIDER_OPENROUTER:
        raise ConfigError("--list-models is only supported with the openrouter provider")
    api_key = resolve_api_key(overrides_from_args(args), source)
    with OpenRouterClient(api_key, title=OPENROUTER_TITLE) as client:
        list_models(client, args.list_models or None)
    return 0


def handle_summarize(args: argparse.Namespace, source: SettingsSource) -> int:
    if not args.url:
        raise UsageError("YouTube URL is required")

    config = resolve_config(overrides_from_args(args), source)
    service = SummaryService(
        config,
        transcript_fetcher=fetch_transcript,
        client_factory=build_client,
    )
    summary = service.summarize(args.url)

    sys.stdout.write(summary)
    if not summary.endswith("\n"):
        sys.stdout.write("\n")
    return 0


def main(argv: Optional[list[str]] = None, source: Optional[SettingsSource] = None) -> int:
    parser = build_parser()
    source = source or ProcessSettingsSource()

    try:
        args = parse_args(parser, argv)
        configure_logging(args.verbose)
        if args.list_models is not None:
            return handle_list_models(args, source)
        return handle_summarize(args, source)
    except (SummaryError, UsageError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
