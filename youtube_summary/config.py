"""Layered settings resolution: CLI flags, environment, credentials and config files."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from .errors import ConfigError

PROVIDER_OPENROUTER = "openrouter"
PROVIDER_ANTHROPIC = "anthropic"
PROVIDERS = (PROVIDER_OPENROUTER, PROVIDER_ANTHROPIC)

DEFAULT_MODELS = {
    PROVIDER_OPENROUTER: "anthropic/claude-haiku-4.5",
    PROVIDER_ANTHROPIC: "claude-sonnet-4-20250514",
}

API_KEY_VARIABLES = {
    PROVIDER_OPENROUTER: "OPENROUTER_API_KEY",
    PROVIDER_ANTHROPIC: "ANTHROPIC_API_KEY",
}

ANTHROPIC_MODEL_ALIASES = {
    "haiku": "claude-3-5-haiku-20241022",
    "sonnet": "claude-sonnet-4-20250514",
    "opus": "claude-opus-4-20250514",
}

DEFAULT_PROMPT = (
    "Please provide a comprehensive summary of the following YouTube video transcript. "
    "Include the main topics discussed, key points, and any important conclusions."
)

_SETTINGS_API_KEY = "api_key"
_SETTINGS_DEFAULT_MODEL = "default_model"

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    return Path("~/.config/youtube-summary").expanduser()


def get_default_settings_path() -> Path:
    return get_config_dir() / "config"


def get_default_credentials_path() -> Path:
    return get_config_dir() / "credentials"


class SettingsSource(Protocol):
    """Read access to the process environment and settings files."""

    def getenv(self, name: str) -> Optional[str]:
        ...

    def read_text(self, path: Path) -> Optional[str]:
        """Return the file contents, or ``None`` when the file does not exist."""
        ...


class ProcessSettingsSource:
    """Settings source backed by ``os.environ`` and the local filesystem."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def getenv(self, name: str) -> Optional[str]:
        return self._environ.get(name)

    def read_text(self, path: Path) -> Optional[str]:
        try:
            return Path(path).expanduser().read_text(encoding="utf-8")
        except FileNotFoundError:
            return None


@dataclass(frozen=True)
class CliOverrides:
    """Values supplied on the command line; ``None`` means "not given"."""

    api_key: Optional[str] = None
    model: Optional[str] = None
    prompt: Optional[str] = None
    config_path: Optional[Path] = None
    verbose: bool = False
    provider: str = PROVIDER_OPENROUTER


@dataclass(frozen=True)
class EffectiveConfig:
    """Settings for one invocation after all sources are merged."""

    api_key: str
    model: str
    prompt: str
    verbose: bool = False
    provider: str = PROVIDER_OPENROUTER

    def __repr__(self) -> str:
        return (
            f"EffectiveConfig(api_key='***', model={self.model!r}, prompt={self.prompt!r}, "
            f"verbose={self.verbose!r}, provider={self.provider!r})"
        )


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def parse_key_value_text(content: str, *, strip_quotes: bool = False) -> Dict[str, str]:
    """Parse ``key=value`` lines, skipping blanks, ``#`` comments and lines without ``=``."""
    values: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        value = value.strip()
        if strip_quotes:
            value = _strip_quotes(value)
        values[key.strip()] = value
    return values


def _load_file(source: SettingsSource, path: Path, label: str, *, strip_quotes: bool) -> Dict[str, str]:
    try:
        content = source.read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {label} file: {exc}") from exc
    if content is None:
        logger.debug("No %s file at %s", label, path)
        return {}
    return parse_key_value_text(content, strip_quotes=strip_quotes)


def load_settings_file(source: SettingsSource, path: Optional[Path] = None) -> Dict[str, str]:
    return _load_file(source, path or get_default_settings_path(), "config", strip_quotes=False)


def load_credentials_file(source: SettingsSource, path: Optional[Path] = None) -> Dict[str, str]:
    return _load_file(source, path or get_default_credentials_path(), "credentials", strip_quotes=True)


def _first_present(*candidates: Optional[str]) -> Optional[str]:
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def _require_provider(provider: str) -> None:
    if provider not in PROVIDERS:
        raise ConfigError(f"Unknown provider '{provider}'. Use one of: {', '.join(PROVIDERS)}")


def _pick_api_key(
    overrides: CliOverrides,
    source: SettingsSource,
    settings: Mapping[str, str],
    credentials: Mapping[str, str],
) -> str:
    variable = API_KEY_VARIABLES[overrides.provider]
    api_key = _first_present(
        overrides.api_key,
        source.getenv(variable),
        credentials.get(variable),
        settings.get(_SETTINGS_API_KEY),
    )
    if not api_key:
        raise ConfigError(
            f"No API key found. Use --api-key, set the {variable} env var, "
            f"add {variable} to ~/.config/youtube-summary/credentials, "
            f"or set {_SETTINGS_API_KEY} in ~/.config/youtube-summary/config"
        )
    return api_key


def resolve_api_key(
    overrides: CliOverrides,
    source: SettingsSource,
    *,
    settings_path: Optional[Path] = None,
    credentials_path: Optional[Path] = None,
) -> str:
    """Resolve only the API key (CLI, env, credentials, then settings file)."""
    _require_provider(overrides.provider)
    settings = load_settings_file(source, overrides.config_path or settings_path)
    credentials = load_credentials_file(source, credentials_path)
    return _pick_api_key(overrides, source, settings, credentials)


def normalize_model(model: str, provider: str) -> str:
    if provider == PROVIDER_ANTHROPIC:
        return ANTHROPIC_MODEL_ALIASES.get(model.lower(), model)
    return model


def resolve_config(
    overrides: CliOverrides,
    source: SettingsSource,
    *,
    settings_path: Optional[Path] = None,
    credentials_path: Optional[Path] = None,
) -> EffectiveConfig:
    """Merge every settings source into one immutable config.

    ``overrides.config_path`` takes priority over ``settings_path``; both
    missing means the default location under ``~/.config/youtube-summary``.
    """
    _require_provider(overrides.provider)
    settings = load_settings_file(source, overrides.config_path or settings_path)
    credentials = load_credentials_file(source, credentials_path)

    api_key = _pick_api_key(overrides, source, settings, credentials)
    model = _first_present(overrides.model, settings.get(_SETTINGS_DEFAULT_MODEL)) or DEFAULT_MODELS[overrides.provider]
    prompt = overrides.prompt if overrides.prompt else DEFAULT_PROMPT

    return EffectiveConfig(
        api_key=api_key,
        model=normalize_model(model, overrides.provider),
        prompt=prompt,
        verbose=overrides.verbose,
        provider=overrides.provider,
    )
