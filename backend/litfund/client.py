"""Client side of the analysis flow: intake state, submission, segmentation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from .config import settings
from .engine.attachments import ingest_paths, remove_attachment
from .engine.segmenter import segment
from .errors import EmptyResultError, ServiceError, ValidationError
from .schemas import AnalysisSection, Attachment, IntakeForm

logger = logging.getLogger(__name__)

# Keys older deployments used for the answer text, in lookup order.
_RESPONSE_KEYS = ("response", "analysis", "content", "message", "text")


@dataclass
class AnalysisResult:
    raw_text: str
    sections: list[AnalysisSection]


@dataclass
class IntakeSession:
    """One user's in-memory intake. Nothing here outlives the process."""

    form: IntakeForm = field(default_factory=IntakeForm)
    attachments: list[Attachment] = field(default_factory=list)
    attachment_errors: list[ValidationError] = field(default_factory=list)
    max_attachment_bytes: int = field(
        default_factory=lambda: settings.max_attachment_bytes
    )

    def add_files(self, paths: Iterable[str | Path]) -> list[ValidationError]:
        errors = ingest_paths(paths, self.attachments, self.max_attachment_bytes)
        self.attachment_errors.extend(errors)
        return errors

    def remove_file(self, index: int) -> Attachment:
        return remove_attachment(self.attachments, index)

    @property
    def can_submit(self) -> bool:
        return self.form.ready_for_submission

    def reset(self) -> None:
        self.form = IntakeForm()
        self.attachments.clear()
        self.attachment_errors.clear()


class AnalysisClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url
        self._transport = transport
        self._timeout = timeout

    async def submit(
        self, form: IntakeForm, attachments: Sequence[Attachment] = ()
    ) -> AnalysisResult:
        missing = form.missing_required_fields()
        if missing:
            raise ValidationError(
                f"Required field(s) missing: {', '.join(missing)}",
                field=missing[0],
            )

        payload = form.model_dump(by_alias=True)
        if attachments:
            payload["attachments"] = [a.model_dump(by_alias=True) for a in attachments]

        async with httpx.AsyncClient(
            base_url=self.base_url, transport=self._transport, timeout=self._timeout
        ) as client:
            res = await client.post("/api/analyze", json=payload)

        if not res.is_success:
            try:
                body = res.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            raise ServiceError(message or f"Error {res.status_code}", res.status_code)

        data = res.json()
        text = next((data[k] for k in _RESPONSE_KEYS if data.get(k)), "")
        if not text:
            raise EmptyResultError()

        return AnalysisResult(raw_text=text, sections=segment(text))

    async def submit_session(self, session: IntakeSession) -> AnalysisResult:
        return await self.submit(session.form, session.attachments)
