import httpx
import pytest
from fastapi.testclient import TestClient

from litfund.api.analyze import get_gateway, get_settings
from litfund.config import Settings
from litfund.engine.llm import GatewayConfig, ModelGateway
from litfund.main import app

SYSTEM_PROMPT = "You are a litigation finance underwriter."


def anthropic_reply(text: str | None) -> dict:
    content = [{"type": "text", "text": text}] if text is not None else []
    return {"id": "msg_1", "type": "message", "role": "assistant", "content": content}


@pytest.fixture
def prompt_file(tmp_path):
    path = tmp_path / "system_prompt.txt"
    path.write_text(SYSTEM_PROMPT, encoding="utf-8")
    return path


@pytest.fixture
def gateway_config():
    return GatewayConfig(api_key="test-key", system_prompt=SYSTEM_PROMPT)


@pytest.fixture
def make_gateway(gateway_config):
    def _make(handler) -> ModelGateway:
        return ModelGateway(gateway_config, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def client():
    # The catch-all handler answers with a 500; keep it from re-raising here.
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def use_gateway(make_gateway):
    """Route the app's model calls through a mock handler."""

    def _use(handler) -> ModelGateway:
        gateway = make_gateway(handler)
        app.dependency_overrides[get_gateway] = lambda: gateway
        return gateway

    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def use_settings():
    def _use(**overrides) -> Settings:
        settings = Settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: settings
        return settings

    yield _use
    app.dependency_overrides.clear()
