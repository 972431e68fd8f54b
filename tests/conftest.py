"""
Shared pytest fixtures.
"""

from pathlib import Path

import httpx
import pytest


class FakeSettingsSource:
    """In-memory settings source: an env dict plus file contents keyed by path."""

    def __init__(self, env=None, files=None):
        self.env = dict(env or {})
        self.files = {Path(path): text for path, text in (files or {}).items()}

    def getenv(self, name):
        return self.env.get(name)

    def read_text(self, path):
        return self.files.get(Path(path))


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir and drop any real API keys from the environment."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    return home


@pytest.fixture
def make_source():
    return FakeSettingsSource


@pytest.fixture
def recorded_requests():
    return []


@pytest.fixture
def mock_transport(recorded_requests):
    """Build an ``httpx.MockTransport`` that records requests and replies with ``response``.

    ``response`` may be an ``httpx.Response``, an exception to raise, or a
    callable taking the request.
    """

    def factory(response):
        def handler(request):
            recorded_requests.append(request)
            if isinstance(response, Exception):
                raise response
            if callable(response):
                return response(request)
            return response

        return httpx.MockTransport(handler)

    return factory
