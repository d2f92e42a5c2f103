import re
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_DATA_URI = re.compile(r"^data:[^,]*,")


def strip_data_uri(value: str) -> str:
    """Drop a ``data:<mime>;base64,`` prefix if the reader supplied one."""
    return _DATA_URI.sub("", value, count=1)


def format_currency(value: str) -> str:
    digits = re.sub(r"\D", "", value or "")
    return f"{int(digits):,}" if digits else ""


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IntakeForm(_CamelModel):
    case_narrative: str = ""
    jurisdiction: str = ""
    key_documents: str = ""
    defendant_profile: str = ""
    damages_estimate: str = ""
    funding_request: str = ""
    representation_status: str = ""
    firm_name: str = ""
    attorney_name: str = ""
    fee_structure: str = ""

    def missing_required_fields(self) -> list[str]:
        missing = []
        if not self.case_narrative.strip():
            missing.append("caseNarrative")
        if not self.funding_request.strip():
            missing.append("fundingRequest")
        return missing

    @property
    def ready_for_submission(self) -> bool:
        return not self.missing_required_fields()


class Attachment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    mime_type: str = Field(default="application/octet-stream", alias="type")
    encoded_content: str = Field(alias="content")

    @field_validator("encoded_content")
    @classmethod
    def _strip_prefix(cls, value: str) -> str:
        return strip_data_uri(value)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class AnalyzeRequest(IntakeForm):
    attachments: Optional[list[Attachment]] = None


# ----------------------------------------------------------------------
# Prompt content parts
# ----------------------------------------------------------------------


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str

    def to_block(self) -> dict:
        return {"type": "text", "text": self.text}


class ImagePart(BaseModel):
    kind: Literal["image"] = "image"
    mime_type: str
    encoded_content: str

    def to_block(self) -> dict:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": self.mime_type,
                "data": self.encoded_content,
            },
        }


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="kind")]


# ----------------------------------------------------------------------
# Analysis output
# ----------------------------------------------------------------------


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    CAUTION = "caution"


class AnalysisSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    verdict: Optional[Verdict] = None


class AnalyzeResponse(BaseModel):
    response: str


class SectionsResponse(BaseModel):
    response: str
    sections: list[AnalysisSection]


class ErrorResponse(BaseModel):
    error: str


class AttachmentUploadResponse(BaseModel):
    attachments: list[Attachment]
    errors: list[str] = Field(default_factory=list)
