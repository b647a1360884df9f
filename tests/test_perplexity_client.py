"""Unit tests for symposium/datasources/perplexity.py; requests is patched."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from symposium.core.exceptions import DataSourceError
from symposium.datasources.perplexity import SEARCH_MAX_TOKENS, SEARCH_TEMPERATURE, PerplexityClient


def _response(status=200, payload=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.json.return_value = payload if payload is not None else {}
    return response


@pytest.fixture
def client():
    return PerplexityClient(api_key="pplx-test", api_url="https://pplx.test", model="sonar")


def test_search_returns_text_model_and_usage(client):
    payload = {
        "model": "sonar",
        "choices": [{"message": {"content": "Fusion output doubled in 2024 [1]."}}],
        "usage": {"total_tokens": 42},
    }
    with patch("symposium.datasources.perplexity.requests.post") as post:
        post.return_value = _response(payload=payload)
        result = client.search("fusion news")

    assert result == {
        "text": "Fusion output doubled in 2024 [1].",
        "source_model": "sonar",
        "usage": {"total_tokens": 42},
    }
    assert post.call_args.args[0] == "https://pplx.test/chat/completions"
    body = post.call_args.kwargs["json"]
    assert body["temperature"] == SEARCH_TEMPERATURE
    assert body["max_tokens"] == SEARCH_MAX_TOKENS
    assert body["messages"][-1] == {"role": "user", "content": "fusion news"}
    assert body["messages"][0]["role"] == "system"


def test_error_status_raises(client):
    with patch("symposium.datasources.perplexity.requests.post") as post:
        post.return_value = _response(401, {"error": {"message": "Invalid API key"}})
        with pytest.raises(DataSourceError, match="401 - Invalid API key"):
            client.search("x")


def test_payload_without_choices_raises(client):
    with patch("symposium.datasources.perplexity.requests.post") as post:
        post.return_value = _response(payload={"choices": []})
        with pytest.raises(DataSourceError, match="Invalid response format"):
            client.search("x")


def test_transport_error_raises(client):
    with patch("symposium.datasources.perplexity.requests.post", side_effect=requests.Timeout("slow")):
        with pytest.raises(DataSourceError) as exc_info:
            client.search("x")

    assert exc_info.value.source == "perplexity"
