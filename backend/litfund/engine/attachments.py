from __future__ import annotations

import base64
import logging
import mimetypes
from collections.abc import Iterable
from pathlib import Path

from fastapi import UploadFile

from ..errors import ValidationError
from ..schemas import Attachment

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def encode_attachment(
    name: str, mime_type: str, data: bytes, max_bytes: int
) -> Attachment:
    """Base64-encode one file, rejecting it when it is over the ceiling."""
    _check_size(name, len(data), max_bytes)
    return Attachment(
        name=name,
        mime_type=mime_type or DEFAULT_MIME_TYPE,
        encoded_content=base64.b64encode(data).decode("ascii"),
    )


def ingest_paths(
    paths: Iterable[str | Path],
    attachments: list[Attachment],
    max_bytes: int,
) -> list[ValidationError]:
    """Append every readable, small-enough file to ``attachments``.

    Files are handled one at a time in the given order. A rejected file is
    reported in the returned list and skipped; the rest of the batch goes on.
    """
    errors: list[ValidationError] = []
    for raw_path in paths:
        path = Path(raw_path)
        mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE
        try:
            _check_size(path.name, path.stat().st_size, max_bytes)
            attachment = encode_attachment(
                path.name, mime_type, path.read_bytes(), max_bytes
            )
        except ValidationError as e:
            errors.append(e)
            continue
        except OSError:
            logger.warning("Could not read attachment %s", path, exc_info=True)
            errors.append(_read_error(path.name))
            continue
        attachments.append(attachment)
    return errors


async def ingest_uploads(
    uploads: Iterable[UploadFile],
    attachments: list[Attachment],
    max_bytes: int,
) -> list[ValidationError]:
    """Async counterpart of :func:`ingest_paths` for multipart uploads."""
    errors: list[ValidationError] = []
    for upload in uploads:
        name = upload.filename or "upload"
        try:
            if upload.size is not None:
                _check_size(name, upload.size, max_bytes)
            data = await upload.read()
            attachment = encode_attachment(
                name, upload.content_type or DEFAULT_MIME_TYPE, data, max_bytes
            )
        except ValidationError as e:
            errors.append(e)
            continue
        except OSError:
            logger.warning("Could not read upload %s", name, exc_info=True)
            errors.append(_read_error(name))
            continue
        finally:
            await upload.close()
        attachments.append(attachment)
    return errors


def remove_attachment(attachments: list[Attachment], index: int) -> Attachment:
    if not 0 <= index < len(attachments):
        raise IndexError(f"No attachment at position {index}")
    return attachments.pop(index)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _check_size(name: str, size: int, max_bytes: int) -> None:
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise ValidationError(
            f'File "{name}" exceeds {limit_mb:g}MB limit.', field="attachments"
        )


def _read_error(name: str) -> ValidationError:
    return ValidationError(f'Could not read file "{name}".', field="attachments")
