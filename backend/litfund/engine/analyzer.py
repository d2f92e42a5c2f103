from __future__ import annotations

import logging

from ..schemas import AnalyzeRequest
from .llm import ModelGateway
from .prompt import compose_prompt

logger = logging.getLogger(__name__)


async def analyze_intake(request: AnalyzeRequest, gateway: ModelGateway) -> str:
    """Compose the intake prompt and return the model's answer text."""
    attachments = request.attachments or []
    _, parts = compose_prompt(request, attachments)
    logger.info(
        "Analyzing intake with %d attachment(s), %d image part(s)",
        len(attachments),
        len(parts) - 1,
    )
    text = await gateway.complete(parts)
    logger.info("Model returned %d characters", len(text))
    return text
