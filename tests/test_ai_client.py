"""Tests for the AI clients and reply parsing."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from ontomap.ai_client import (
    DETAIL_NO_KEY,
    DETAIL_UNAVAILABLE,
    ChatCompletionsClient,
    DemoClient,
    build_ai_client,
    parse_steps,
)
from ontomap.config import AIConfig
from ontomap.errors import AIServiceError, ConfigurationError


def _response(status=200, body=None, ok=None):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400 if ok is None else ok
    response.json.return_value = body if body is not None else {}
    return response


def _reply(content):
    return _response(body={"choices": [{"message": {"content": content}}]})


@pytest.fixture()
def client():
    return ChatCompletionsClient(AIConfig(api_key="sk-test", base_url="https://ai.example/v1/"))


class TestParseSteps:
    def test_plain_json(self):
        assert parse_steps('{"steps": ["a", "b"]}') == ["a", "b"]

    def test_fenced_json(self):
        assert parse_steps('```json\n{"steps": ["x"]}\n```') == ["x"]

    def test_missing_steps_is_empty(self):
        assert parse_steps('{"topics": ["x"]}') == []
        assert parse_steps('{"steps": "x"}') == []
        assert parse_steps('["x"]') == []

    def test_invalid_json_raises(self):
        with pytest.raises(AIServiceError, match="Failed to parse AI response"):
            parse_steps("Sure! Here are some topics")


class TestChatCompletionsClient:
    def test_expand_posts_chat_request(self, client):
        with patch("ontomap.ai_client.requests.post", return_value=_reply('{"steps": ["A", "B", "C"]}')) as post:
            topics = asyncio.run(client.expand("Optics"))

        assert topics == ["A", "B", "C"]
        args, kwargs = post.call_args
        assert args[0] == "https://ai.example/v1/chat/completions"
        assert kwargs["headers"] == {"Authorization": "Bearer sk-test"}
        assert kwargs["json"]["model"] == "openai/gpt-4o-mini"
        assert kwargs["json"]["temperature"] == 0.7
        assert '"Optics"' in kwargs["json"]["messages"][1]["content"]

    def test_http_error_uses_provider_message(self, client):
        body = {"error": {"message": "Rate limited"}}
        with patch("ontomap.ai_client.requests.post", return_value=_response(429, body)):
            with pytest.raises(AIServiceError, match="Rate limited"):
                client.expand_sync("Optics")

    def test_http_error_without_body(self, client):
        response = _response(500)
        response.json.side_effect = ValueError("no json")
        with patch("ontomap.ai_client.requests.post", return_value=response):
            with pytest.raises(AIServiceError, match="API Error: 500"):
                client.expand_sync("Optics")

    def test_network_failure(self, client):
        with patch("ontomap.ai_client.requests.post", side_effect=requests.ConnectionError("down")):
            with pytest.raises(AIServiceError):
                client.expand_sync("Optics")

    def test_empty_content(self, client):
        with patch("ontomap.ai_client.requests.post", return_value=_reply("")):
            with pytest.raises(AIServiceError, match="No content received from AI"):
                client.expand_sync("Optics")

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("ONTOMAP_API_KEY", raising=False)
        client = ChatCompletionsClient(AIConfig())
        with patch("ontomap.ai_client.requests.post") as post:
            with pytest.raises(ConfigurationError):
                client.expand_sync("Optics")
            assert client.describe_sync("Optics") == DETAIL_NO_KEY
        post.assert_not_called()

    def test_describe_sends_max_tokens(self, client):
        with patch("ontomap.ai_client.requests.post", return_value=_reply("  Light and its behavior.\n")) as post:
            text = asyncio.run(client.describe("Optics"))
        assert text == "Light and its behavior."
        assert post.call_args.kwargs["json"]["max_tokens"] == 100

    def test_describe_degrades_on_failure(self, client):
        with patch("ontomap.ai_client.requests.post", return_value=_response(503)):
            assert client.describe_sync("Optics") == DETAIL_UNAVAILABLE

    def test_bridge(self, client):
        with patch("ontomap.ai_client.requests.post", return_value=_reply('{"steps": ["Lenses"]}')) as post:
            assert client.bridge_sync("Optics", "Cameras") == ["Lenses"]
        prompt = post.call_args.kwargs["json"]["messages"][1]["content"]
        assert '"Optics"' in prompt and '"Cameras"' in prompt


class TestDemoClient:
    def test_canned_topics(self):
        topics = asyncio.run(DemoClient(latency=0).expand("Tea"))
        assert topics == [
            "Tea - Branch A",
            "Tea - Branch B",
            "Tea - Branch C",
            "Why Tea?",
            "History of Tea",
        ]

    def test_canned_description_mentions_label(self):
        assert '"Tea"' in asyncio.run(DemoClient(latency=0).describe("Tea"))


def test_build_ai_client_picks_demo():
    assert isinstance(build_ai_client(AIConfig(demo_mode=True)), DemoClient)
    assert isinstance(build_ai_client(AIConfig()), ChatCompletionsClient)
