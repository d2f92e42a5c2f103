from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from ..config import Settings
from ..errors import ConfigurationError, UpstreamError
from ..schemas import ContentPart

logger = logging.getLogger(__name__)


def load_system_prompt(path: str | Path) -> str:
    prompt_path = Path(path).resolve()
    if not prompt_path.is_file():
        raise ConfigurationError(
            f"{prompt_path.name} not found at {prompt_path}. "
            "Ensure it exists at the project root."
        )
    return prompt_path.read_text(encoding="utf-8")


@dataclass(frozen=True)
class GatewayConfig:
    api_key: str
    system_prompt: str
    model: str = "claude-sonnet-4-5"
    max_tokens: int = 16000
    api_url: str = "https://api.anthropic.com/v1/messages"
    api_version: str = "2023-06-01"
    timeout: float | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        if not settings.anthropic_api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY is not set. Add it to your environment."
            )
        return cls(
            api_key=settings.anthropic_api_key,
            system_prompt=load_system_prompt(settings.system_prompt_path),
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
            api_url=settings.anthropic_api_url,
            api_version=settings.anthropic_version,
            timeout=settings.anthropic_timeout,
        )


class ModelGateway:
    """Single request/response exchange with the Anthropic Messages API."""

    def __init__(
        self,
        config: GatewayConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def build_payload(self, parts: Sequence[ContentPart]) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "system": self.config.system_prompt,
            "messages": [
                {"role": "user", "content": [p.to_block() for p in parts]}
            ],
        }

    async def complete(self, parts: Sequence[ContentPart]) -> str:
        headers = {
            "content-type": "application/json",
            "x-api-key": self.config.api_key,
            "anthropic-version": self.config.api_version,
        }
        async with httpx.AsyncClient(
            timeout=self.config.timeout, transport=self._transport
        ) as client:
            response = await client.post(
                self.config.api_url,
                headers=headers,
                json=self.build_payload(parts),
            )

        if not response.is_success:
            logger.error(
                "Model endpoint returned %s: %s",
                response.status_code,
                response.text[:500],
            )
            raise UpstreamError(response.status_code, response.text)

        return extract_text(response.json())


def extract_text(envelope: dict[str, Any]) -> str:
    """Text of the first ``type == "text"`` content item, or ``""``."""
    for item in envelope.get("content") or []:
        if isinstance(item, dict) and item.get("type") == "text":
            return item.get("text") or ""
    return ""
