"""
Unit tests for the title suggestion client and the plain page fetch.

The completions provider is replaced with httpx.MockTransport.
"""

import json

import httpx
import pytest

from webprint_service.config import WebPrintSettings
from webprint_service.errors import UpstreamError
from webprint_service.title_client import (
    SYSTEM_PROMPT,
    build_title_messages,
    fetch_page_html,
    suggest_title,
)


def _settings(**overrides) -> WebPrintSettings:
    values = {
        "openai_api_key": "sk-test-key",
        "openai_base_url": "https://llm.test/v1",
        "openai_model": "test-model",
    }
    values.update(overrides)
    return WebPrintSettings(**values)


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


class TestSuggestTitle:
    """Tests for suggest_title."""

    @pytest.mark.asyncio
    async def test_returns_none_without_api_key(self):
        """Without a key the feature is off: no request, no error."""
        handler = RecordingHandler(httpx.Response(200, json=_completion("Ignored")))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await suggest_title("text", "https://example.com", settings=_settings(openai_api_key=""), client=client)

        assert result is None
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_returns_trimmed_title(self):
        handler = RecordingHandler(httpx.Response(200, json=_completion("  My Great Article \n")))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await suggest_title("Page text", "https://example.com/a", settings=_settings(), client=client)

        assert result == "My Great Article"

    @pytest.mark.asyncio
    async def test_request_shape(self):
        """One POST to {base}/chat/completions with the expected payload."""
        handler = RecordingHandler(httpx.Response(200, json=_completion("Title")))
        long_text = "x" * 10000
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await suggest_title(long_text, "https://example.com/a", settings=_settings(), client=client)

        assert len(handler.requests) == 1
        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://llm.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test-key"

        body = json.loads(request.content)
        assert body["model"] == "test-model"
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 24
        assert body["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        user_content = body["messages"][1]["content"]
        assert "URL: https://example.com/a" in user_content
        assert "x" * 6000 in user_content
        assert "x" * 6001 not in user_content

    @pytest.mark.asyncio
    async def test_non_success_raises_upstream_error_with_body(self):
        handler = RecordingHandler(httpx.Response(429, text="rate limited"))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamError, match="LLM error: rate limited"):
                await suggest_title("text", "https://example.com", settings=_settings(), client=client)

    @pytest.mark.asyncio
    async def test_transport_failure_raises_upstream_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamError):
                await suggest_title("text", "https://example.com", settings=_settings(), client=client)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        _completion(""),
        _completion("   "),
        _completion(None),
        {"choices": []},
        {},
    ])
    async def test_empty_completion_returns_none(self, payload):
        handler = RecordingHandler(httpx.Response(200, json=payload))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await suggest_title("text", "https://example.com", settings=_settings(), client=client)

        assert result is None

    def test_build_title_messages_handles_empty_text(self):
        messages = build_title_messages("", "https://example.com")
        assert messages[0]["role"] == "system"
        assert "Content (truncated): " in messages[1]["content"]


class TestFetchPageHtml:
    """Tests for fetch_page_html."""

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "https://example.com/new"})
            return httpx.Response(200, text="<html><title>New</title></html>")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            html = await fetch_page_html("https://example.com/old", settings=_settings(), client=client)

        assert "<title>New</title>" in html

    @pytest.mark.asyncio
    async def test_sends_accept_language(self):
        handler = RecordingHandler(httpx.Response(200, text="ok"))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await fetch_page_html("https://example.com", settings=_settings(), client=client)

        assert handler.requests[0].headers["Accept-Language"] == "en-US,en;q=0.9"

    @pytest.mark.asyncio
    async def test_error_status_raises_upstream_error(self):
        handler = RecordingHandler(httpx.Response(404, text="missing"))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamError, match="HTTP 404"):
                await fetch_page_html("https://example.com/missing", settings=_settings(), client=client)
