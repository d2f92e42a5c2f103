"""Error types raised along the intake -> analysis pipeline.

Every error carries the HTTP status it maps to, so the API layer can turn any
of them into the ``{"error": ...}`` envelope without a lookup table.
"""

from __future__ import annotations

from typing import Any


class LitfundError(Exception):
    """Base exception for all pipeline errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(LitfundError):
    """Missing credential or instruction document. Fatal, never retried."""

    status_code = 500


class ValidationError(LitfundError):
    """A rejected attachment or an intake that is not ready for submission.

    Attachment rejections are recovered locally: the batch keeps going and
    the error is shown next to the field named by ``field``.
    """

    status_code = 422

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class UpstreamError(LitfundError):
    """The model endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Claude API error: {status_code} - {body}", status_code)
        self.body = body


class EmptyResultError(LitfundError):
    """The model answered successfully but without any extractable text."""

    status_code = 502

    def __init__(
        self,
        message: str = "Empty response from analysis engine. Please try again.",
    ) -> None:
        super().__init__(message)


class ServiceError(LitfundError):
    """The analysis service itself rejected a client submission."""
