"""
Tests for the provider clients: request building, text extraction and error mapping.
"""

import json

import httpx
import pytest

from youtube_summary.config import EffectiveConfig
from youtube_summary.errors import ApiRequestError
from youtube_summary.providers import (
    MAX_OUTPUT_TOKENS,
    TRANSCRIPT_SEPARATOR,
    AnthropicClient,
    OpenRouterClient,
    build_request_body,
)


@pytest.fixture
def config():
    return EffectiveConfig(api_key="test-key", model="vendor/model", prompt="Summarize this.")


@pytest.fixture(params=["openrouter", "anthropic"])
def provider(request):
    return request.param


def make_client(provider, transport):
    if provider == "anthropic":
        return AnthropicClient("test-key", transport=transport)
    return OpenRouterClient("test-key", title="youtube-summary", transport=transport)


def success_payload(provider, fragments):
    if provider == "anthropic":
        return {"content": [{"type": "text", "text": text} for text in fragments]}
    return {"choices": [{"message": {"role": "assistant", "content": text}} for text in fragments]}


def test_request_body_has_single_user_message():
    body = build_request_body("m", "Prompt", "transcript words")
    assert body == {
        "model": "m",
        "max_tokens": MAX_OUTPUT_TOKENS,
        "messages": [{"role": "user", "content": "Prompt" + TRANSCRIPT_SEPARATOR + "transcript words"}],
    }
    assert MAX_OUTPUT_TOKENS == 4096


def test_summarize_joins_fragments_in_order(provider, config, mock_transport, recorded_requests):
    payload = success_payload(provider, ["first", "second", "third"])
    client = make_client(provider, mock_transport(httpx.Response(200, json=payload)))

    assert client.summarize(config, "the transcript") == "first\nsecond\nthird"

    assert len(recorded_requests) == 1
    sent = json.loads(recorded_requests[0].content)
    assert sent["model"] == "vendor/model"
    assert sent["max_tokens"] == 4096
    assert sent["messages"] == [
        {"role": "user", "content": "Summarize this.\n\n---\n\nTranscript:\nthe transcript"}
    ]


def test_empty_result_is_not_an_error(provider, config, mock_transport):
    client = make_client(provider, mock_transport(httpx.Response(200, json=success_payload(provider, []))))
    assert client.summarize(config, "t") == ""


def test_anthropic_request_shape(config, mock_transport, recorded_requests):
    client = AnthropicClient("test-key", transport=mock_transport(httpx.Response(200, json={"content": []})))
    client.summarize(config, "t")

    request = recorded_requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.anthropic.com/v1/messages"
    assert request.headers["x-api-key"] == "test-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert "authorization" not in request.headers


def test_openrouter_request_shape(config, mock_transport, recorded_requests):
    client = OpenRouterClient(
        "test-key",
        referer="https://example.com",
        title="youtube-summary",
        transport=mock_transport(httpx.Response(200, json={"choices": []})),
    )
    client.summarize(config, "t")

    request = recorded_requests[0]
    assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer test-key"
    assert request.headers["http-referer"] == "https://example.com"
    assert request.headers["x-title"] == "youtube-summary"


def test_transport_failure(provider, config, mock_transport):
    client = make_client(provider, mock_transport(httpx.ConnectError("connection refused")))
    with pytest.raises(ApiRequestError) as exc_info:
        client.summarize(config, "t")
    assert exc_info.value.detail == "Failed to send request: connection refused"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_http_error_with_envelope(provider, config, mock_transport):
    envelope = {"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}}
    client = make_client(provider, mock_transport(httpx.Response(401, json=envelope)))
    with pytest.raises(ApiRequestError) as exc_info:
        client.summarize(config, "t")
    assert exc_info.value.detail == "API error (401 Unauthorized): invalid x-api-key"
    assert str(exc_info.value) == "API request failed: API error (401 Unauthorized): invalid x-api-key"


@pytest.mark.parametrize("body", ["<html>Bad Gateway</html>", '{"error": "just a string"}', "[1, 2]", ""])
def test_http_error_with_raw_body(provider, config, mock_transport, body):
    client = make_client(provider, mock_transport(httpx.Response(502, text=body)))
    with pytest.raises(ApiRequestError) as exc_info:
        client.summarize(config, "t")
    assert exc_info.value.detail == f"API error (502 Bad Gateway): {body}"


@pytest.mark.parametrize(
    "response",
    [
        lambda request: httpx.Response(200, text="not json"),
        lambda request: httpx.Response(200, json={"unexpected": True}),
        lambda request: httpx.Response(200, json=["a list"]),
    ],
)
def test_unparseable_success_body(provider, config, mock_transport, response):
    client = make_client(provider, mock_transport(response))
    with pytest.raises(ApiRequestError) as exc_info:
        client.summarize(config, "t")
    assert exc_info.value.detail.startswith("Failed to parse response: ")


def test_openrouter_shape_is_not_accepted_by_anthropic(config, mock_transport):
    payload = success_payload("openrouter", ["text"])
    client = AnthropicClient("test-key", transport=mock_transport(httpx.Response(200, json=payload)))
    with pytest.raises(ApiRequestError):
        client.summarize(config, "t")


def test_no_retry_after_server_error(provider, config, mock_transport, recorded_requests):
    client = make_client(provider, mock_transport(httpx.Response(503, json={"error": {"message": "overloaded"}})))
    with pytest.raises(ApiRequestError):
        client.summarize(config, "t")
    assert len(recorded_requests) == 1


def test_missing_api_key_is_rejected():
    with pytest.raises(ApiRequestError):
        OpenRouterClient("")


def test_client_closes_as_context_manager(mock_transport):
    with OpenRouterClient("k", transport=mock_transport(httpx.Response(200, json={}))) as client:
        pass
    assert client._client.is_closed
