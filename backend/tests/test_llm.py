import json

import httpx
import pytest

from conftest import SYSTEM_PROMPT, anthropic_reply
from litfund.config import Settings
from litfund.engine.llm import GatewayConfig, extract_text, load_system_prompt
from litfund.errors import ConfigurationError, UpstreamError
from litfund.schemas import ImagePart, TextPart


def test_config_requires_api_key(prompt_file):
    settings = Settings(anthropic_api_key="", system_prompt_path=str(prompt_file))
    with pytest.raises(ConfigurationError) as exc:
        GatewayConfig.from_settings(settings)
    assert "ANTHROPIC_API_KEY is not set" in exc.value.message
    assert exc.value.status_code == 500


def test_config_requires_system_prompt(tmp_path):
    settings = Settings(
        anthropic_api_key="sk-test",
        system_prompt_path=str(tmp_path / "system_prompt.txt"),
    )
    with pytest.raises(ConfigurationError) as exc:
        GatewayConfig.from_settings(settings)
    assert "system_prompt.txt not found" in exc.value.message


def test_config_from_settings(prompt_file):
    settings = Settings(
        anthropic_api_key="sk-test",
        system_prompt_path=str(prompt_file),
        anthropic_max_tokens=2000,
    )
    config = GatewayConfig.from_settings(settings)
    assert config.system_prompt == SYSTEM_PROMPT == load_system_prompt(prompt_file)
    assert config.max_tokens == 2000
    assert config.model == settings.anthropic_model


async def test_complete_sends_one_request(make_gateway):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=anthropic_reply("## Verdict\nPass"))

    gateway = make_gateway(handler)
    parts = [
        TextPart(text="=== LITIGATION FUNDING APPLICATION ==="),
        ImagePart(mime_type="image/png", encoded_content="AAAA"),
    ]
    text = await gateway.complete(parts)

    assert text == "## Verdict\nPass"
    assert len(calls) == 1
    request = calls[0]
    assert str(request.url) == "https://api.anthropic.com/v1/messages"
    assert request.headers["x-api-key"] == "test-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert request.headers["content-type"] == "application/json"

    body = json.loads(request.content)
    assert body["model"] == "claude-sonnet-4-5"
    assert body["max_tokens"] == 16000
    assert body["system"] == SYSTEM_PROMPT
    assert body["messages"] == [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "=== LITIGATION FUNDING APPLICATION ==="},
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": "image/png", "data": "AAAA"},
                },
            ],
        }
    ]


async def test_non_success_status_raises_upstream_error(make_gateway):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429, text="rate limited")

    with pytest.raises(UpstreamError) as exc:
        await make_gateway(handler).complete([TextPart(text="intake")])

    assert exc.value.status_code == 429
    assert exc.value.body == "rate limited"
    assert exc.value.message == "Claude API error: 429 - rate limited"
    assert len(calls) == 1


async def test_missing_text_part_yields_empty_string(make_gateway):
    gateway = make_gateway(lambda request: httpx.Response(200, json=anthropic_reply(None)))
    assert await gateway.complete([TextPart(text="intake")]) == ""


def test_extract_text_takes_first_text_item():
    envelope = {
        "content": [
            {"type": "tool_use", "id": "t1", "name": "lookup", "input": {}},
            {"type": "text", "text": "first"},
            {"type": "text", "text": "second"},
        ]
    }
    assert extract_text(envelope) == "first"
    assert extract_text({}) == ""


def test_timeout_reaches_gateway_config(prompt_file):
    settings = Settings(
        anthropic_api_key="sk-test",
        system_prompt_path=str(prompt_file),
        anthropic_timeout=30,
    )
    assert GatewayConfig.from_settings(settings).timeout == 30


async def test_timeout_propagates_without_retry(make_gateway):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(httpx.ReadTimeout):
        await make_gateway(handler).complete([TextPart(text="intake")])
    assert len(calls) == 1
